"""Main Typer application — imports and registers all CLI commands.

Entry point: ``buildtrust`` (configured via pyproject.toml console_scripts).
Running it without a subcommand performs the audit.
"""

from __future__ import annotations

from pathlib import Path

import typer

from buildtrust.cli._errors import fail_on_error
from buildtrust.cli.commands.audit import audit_and_report, audit_cmd
from buildtrust.cli.commands.ledger_cmd import ledger_cmd
from buildtrust.config import load_config
from buildtrust.logging_config import configure_logging

app = typer.Typer(
    name="buildtrust",
    help="Review build hooks in a dependency tree before they run.",
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="audit", help="Review build hooks that are not yet trusted.")(audit_cmd)
app.command(name="ledger", help="Show recorded trust decisions.")(ledger_cmd)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    archive: Path = typer.Option(
        None, "--archive", help="Archive directory (default: $CARGO_HOME/audits/build-rs)."
    ),
) -> None:
    """Review build hooks in a dependency tree before they run."""
    configure_logging()
    with fail_on_error():
        config = load_config(archive_path=archive)
        # Console only; the audit opens the archive log itself
        configure_logging(config.log_level)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        audit_and_report(config)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
