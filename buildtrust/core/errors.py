"""Error taxonomy for buildtrust.

Every error is fatal at the point of occurrence. The core never catches and
retries; the CLI catches ``BuildTrustError`` once, logs a single line and
exits with status 1.
"""

from __future__ import annotations


class BuildTrustError(RuntimeError):
    """Base class for every fatal buildtrust error."""


class ConfigurationError(BuildTrustError):
    """Raised when a required configuration value (e.g. the editor) is missing."""


class DependencyResolutionError(BuildTrustError):
    """Raised when the metadata provider cannot resolve the dependency graph."""


class SubprocessError(BuildTrustError):
    """Raised when an external binary is missing or exits with a non-zero status."""


class StorageIOError(BuildTrustError):
    """Raised when a file in the archive or a build hook cannot be read or written."""


class SerializationError(BuildTrustError):
    """Raised when the ledger file exists but does not deserialize."""
