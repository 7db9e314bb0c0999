"""Shared error handling for CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import typer

from buildtrust.core.errors import BuildTrustError

logger = logging.getLogger("buildtrust.cli")


@contextmanager
def fail_on_error() -> Iterator[None]:
    """Log a ``BuildTrustError`` as a single line and exit with status 1."""
    try:
        yield
    except BuildTrustError as e:
        logger.error("%s", e)
        raise typer.Exit(code=1) from e
