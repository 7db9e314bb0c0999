"""Content hashing for build hooks.

A hook's digest is the lower-case SHA-256 hex of its raw bytes. Identical
bytes across packages and versions yield identical digests, which is what
lets one review decision cover every copy of a hook.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from buildtrust.core.errors import StorageIOError


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def read_hook_bytes(path: Path) -> bytes:
    """Read a build hook's bytes, mapping OS failures to ``StorageIOError``."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise StorageIOError(f"failed to read build hook {path}: {exc}") from exc


def digest_file(path: Path) -> str:
    """Digest the bytes of the file at *path*.

    Any read failure is fatal for the run; there is no partial skip.
    """
    return sha256_hex(read_hook_bytes(path))
