"""Logging setup for the buildtrust CLI.

Messages go to stderr through Rich and, once the archive directory exists,
are appended to ``<archive>/audit_build.log``. The log file is excluded
from version control by the archive's ignore file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from buildtrust.core.errors import StorageIOError

LOGGER_NAME = "buildtrust"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_path: Path | None = None) -> logging.Logger:
    """Configure the ``buildtrust`` logger. Safe to call more than once.

    Raises ``StorageIOError`` when *log_path* cannot be opened for append.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_path is not None:
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"failed to open log file {log_path}: {exc}") from exc
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
