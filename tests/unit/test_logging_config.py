"""Tests for configure_logging — console and archive log handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from buildtrust.core.errors import StorageIOError
from buildtrust.logging_config import LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestConfigureLogging:
    def test_console_only(self):
        logger = configure_logging("debug")
        assert logger.level == logging.DEBUG
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_appends_to_log_file(self, tmp_path: Path):
        log_path = tmp_path / "archive" / "audit_build.log"
        log_path.parent.mkdir()
        log_path.write_text("earlier run\n")

        logger = configure_logging("INFO", log_path)
        logger.info("reviewed pkg@1.0")
        for handler in logger.handlers:
            handler.flush()

        lines = log_path.read_text().splitlines()
        assert lines[0] == "earlier run"
        assert lines[-1].endswith("reviewed pkg@1.0")

    def test_reconfigure_replaces_handlers(self, tmp_path: Path):
        configure_logging("INFO", tmp_path / "a.log")
        logger = configure_logging("INFO")
        assert len(logger.handlers) == 1

    def test_unopenable_log_file_is_storage_error(self, tmp_path: Path):
        not_a_dir = tmp_path / "archive"
        not_a_dir.write_text("")
        with pytest.raises(StorageIOError, match="log file"):
            configure_logging("INFO", not_a_dir / "audit_build.log")
