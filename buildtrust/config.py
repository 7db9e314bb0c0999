"""Runtime configuration — env-driven via pydantic-settings.

Reads BUILDTRUST_* environment variables and an optional .env file. The
editor falls back to the conventional ``EDITOR`` variable.

Examples
--------
Override via environment::

    export EDITOR="code --wait"
    export BUILDTRUST_ARCHIVE_PATH=/tmp/audits
    export BUILDTRUST_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildtrust.core.archive import LOG_FILE
from buildtrust.core.errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_archive_path() -> Path:
    """``$CARGO_HOME/audits/build-rs``, with ``~/.cargo`` when CARGO_HOME is unset."""
    cargo_home = os.environ.get("CARGO_HOME")
    base = Path(cargo_home) if cargo_home else Path.home() / ".cargo"
    return base / "audits" / "build-rs"


class AuditConfig(BaseSettings):
    """Configuration for one audit run."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDTRUST_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Archive
    archive_path: Path = Field(default_factory=default_archive_path)
    git_bin: str = "git"
    git_user_name: str | None = None
    git_user_email: str | None = None

    # Review
    editor: str | None = Field(
        default=None,
        validation_alias=AliasChoices("BUILDTRUST_EDITOR", "EDITOR", "editor"),
    )

    # Dependency resolution
    cargo_bin: str = "cargo"
    manifest_path: Path | None = None
    fetch: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: str = LOG_FILE

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to an upper-case standard level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def log_path(self) -> Path:
        return self.archive_path / self.log_file

    def require_editor(self) -> str:
        """Return the configured editor or fail the run."""
        if not self.editor:
            raise ConfigurationError("the EDITOR environment variable must be set")
        return self.editor


def load_config(**overrides: Any) -> AuditConfig:
    """Build an ``AuditConfig`` from the environment plus *overrides*.

    ``None`` overrides are dropped so the environment value applies. An
    invalid setting is reported as ``ConfigurationError``.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return AuditConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc
