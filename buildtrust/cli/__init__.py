"""buildtrust CLI — Typer-based command-line interface.

``buildtrust`` with no subcommand audits the build hooks of the current
crate's dependency tree. ``buildtrust ledger`` shows recorded decisions.

All output uses Rich for formatted terminal display.
"""
