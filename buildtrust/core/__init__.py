"""Core trust ledger, archive and review workflow."""
