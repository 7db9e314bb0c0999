"""``buildtrust audit`` — review untrusted build hooks in the dependency tree.

Resolves the dependency graph, opens every build hook whose digest is not
already trusted in ``$EDITOR``, asks for a decision, and records it in the
archive.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from buildtrust.cli._errors import fail_on_error
from buildtrust.config import AuditConfig
from buildtrust.core.archive import GitArchive
from buildtrust.core.capabilities import (
    ConfirmationPrompt,
    ConsolePrompt,
    EditorLauncher,
    MetadataProvider,
    SubprocessEditorLauncher,
)
from buildtrust.core.workflow import ReviewWorkflow
from buildtrust.logging_config import configure_logging
from buildtrust.models.review import ReviewSummary
from buildtrust.providers.cargo import CargoMetadataProvider

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def build_archive(config: AuditConfig) -> GitArchive:
    return GitArchive(
        config.archive_path,
        git_bin=config.git_bin,
        user_name=config.git_user_name,
        user_email=config.git_user_email,
        log_file=config.log_file,
    )


def run_audit(
    config: AuditConfig,
    *,
    provider: MetadataProvider | None = None,
    launcher: EditorLauncher | None = None,
    prompt: ConfirmationPrompt | None = None,
) -> ReviewSummary:
    """Wire the default collaborators from *config* and run the review workflow.

    The editor is checked first so a missing ``EDITOR`` fails before any
    dependency resolution or archive access.
    """
    editor = config.require_editor()
    workflow = ReviewWorkflow(
        archive=build_archive(config),
        provider=provider
        or CargoMetadataProvider(
            cargo_bin=config.cargo_bin,
            manifest_path=config.manifest_path,
            fetch=config.fetch,
        ),
        launcher=launcher or SubprocessEditorLauncher(editor),
        prompt=prompt or ConsolePrompt(),
    )
    summary = workflow.run()
    logger.debug(
        "audit finished: %d hooks, %d skipped, %d reviewed, %d changes",
        summary.hooks,
        summary.skipped,
        summary.reviewed,
        summary.changes,
    )
    return summary


def print_summary(summary: ReviewSummary) -> None:
    console.print(
        f"[bold]{summary.hooks}[/bold] build hooks: "
        f"[green]{summary.skipped} already trusted[/green], "
        f"{summary.reviewed} reviewed "
        f"([green]{summary.trusted} trusted[/green], [red]{summary.untrusted} untrusted[/red])"
    )
    if summary.ledger_saved:
        console.print("[dim]Trust store updated.[/dim]")


def audit_and_report(config: AuditConfig) -> None:
    """Run the audit for the CLI: check the editor, open the log, print the summary.

    The archive directory, which holds the log file, is only created once
    the editor is known to be configured.
    """
    with fail_on_error():
        config.require_editor()
        configure_logging(config.log_level, config.log_path)
        print_summary(run_audit(config))


def audit_cmd(
    ctx: typer.Context,
    no_fetch: bool = typer.Option(
        False, "--no-fetch", help="Skip `cargo fetch` before reading metadata."
    ),
    manifest_path: Path = typer.Option(
        None, "--manifest-path", help="Path to the Cargo.toml to audit."
    ),
) -> None:
    """Review build hooks that are not yet trusted."""
    config: AuditConfig = ctx.obj
    update: dict[str, object] = {}
    if no_fetch:
        update["fetch"] = False
    if manifest_path is not None:
        update["manifest_path"] = manifest_path
    if update:
        config = config.model_copy(update=update)

    audit_and_report(config)
