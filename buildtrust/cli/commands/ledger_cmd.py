"""``buildtrust ledger`` — show recorded trust decisions."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from buildtrust.cli._errors import fail_on_error
from buildtrust.config import AuditConfig
from buildtrust.core.archive import GitArchive
from buildtrust.core.trust_ledger import TrustLedger

console = Console()


def ledger_cmd(
    ctx: typer.Context,
    trusted_only: bool = typer.Option(False, "--trusted", help="Only show trusted digests."),
) -> None:
    """Show the trust ledger as a table. Read-only."""
    config: AuditConfig = ctx.obj
    with fail_on_error():
        ledger = TrustLedger.load(GitArchive(config.archive_path, git_bin=config.git_bin))

    if not len(ledger):
        console.print("[dim]No build hooks reviewed yet.[/dim]")
        return

    table = Table(title="Trust Store")
    table.add_column("Digest", style="cyan", no_wrap=True)
    table.add_column("Trusted", justify="center")
    table.add_column("Packages")

    for digest, record in ledger.items():
        if trusted_only and not record.trusted:
            continue
        trusted = "[green]Yes[/green]" if record.trusted else "[red]No[/red]"
        table.add_row(digest[:16], trusted, ", ".join(sorted(record.associates)))

    console.print(table)
