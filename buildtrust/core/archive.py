"""Versioned archive — a git-controlled directory of trust provenance.

Layout of the archive directory::

    {root}/.git/
    {root}/.gitignore          # excludes the audit log
    {root}/trust_store.json    # serialized TrustLedger
    {root}/{name}@{version}    # one immutable snapshot per reviewed package

The core talks to the archive only through the ``VersionedArchive``
protocol; ``GitArchive`` implements it with the ``git`` binary.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from buildtrust.core.errors import StorageIOError, SubprocessError

logger = logging.getLogger(__name__)

LEDGER_FILE = "trust_store.json"
IGNORE_FILE = ".gitignore"
LOG_FILE = "audit_build.log"

EMPTY_LEDGER = b"{}\n"
INITIAL_COMMIT_MESSAGE = "Initial files."
IGNORE_COMMIT_MESSAGE = "Ignore audit log."


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class VersionedArchive(Protocol):
    """Capability interface over the version-controlled archive directory.

    Paths passed to ``stage``/``commit`` and names passed to the file
    helpers are relative to ``root``.
    """

    @property
    def root(self) -> Path: ...

    def ensure_initialized(self) -> None:
        """Create the archive on first use; no-op when it already exists."""
        ...

    def stage(self, path: str) -> None: ...

    def commit(self, path: str, message: str) -> None:
        """Commit *path*. Fails if nothing is staged for it."""
        ...

    def is_clean(self) -> bool:
        """True iff the working tree has no staged-but-uncommitted changes."""
        ...

    def exists(self, name: str) -> bool: ...

    def read_bytes(self, name: str) -> bytes: ...

    def write_bytes(self, name: str, data: bytes) -> None: ...


# ---------------------------------------------------------------------------
# Git implementation
# ---------------------------------------------------------------------------


class GitArchive:
    """``VersionedArchive`` backed by a git repository.

    Parameters
    ----------
    root:
        Archive directory. Created on ``ensure_initialized()``.
    git_bin:
        Name or path of the git executable.
    user_name, user_email:
        Optional committer identity, passed as ``-c user.*`` so the archive
        works on machines without a global git identity.
    log_file:
        Name of the audit log excluded by the ignore file.
    """

    def __init__(
        self,
        root: Path,
        *,
        git_bin: str = "git",
        user_name: str | None = None,
        user_email: str | None = None,
        log_file: str = LOG_FILE,
    ) -> None:
        self._root = Path(root)
        self._git_bin = git_bin
        self._user_name = user_name
        self._user_email = user_email
        self._log_file = log_file

    @property
    def root(self) -> Path:
        return self._root

    def is_initialized(self) -> bool:
        return (self._root / ".git").exists()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def ensure_initialized(self) -> None:
        """Initialize the repository, the empty ledger and the ignore file.

        Each initial file is staged and committed as its own history entry.
        Calling this on an existing archive does nothing.
        """
        if self.is_initialized():
            return

        logger.debug("init repository: %s", self._root)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(f"failed to create archive {self._root}: {exc}") from exc
        self._git("init")

        self.write_bytes(LEDGER_FILE, EMPTY_LEDGER)
        self.stage(LEDGER_FILE)
        self.commit(LEDGER_FILE, INITIAL_COMMIT_MESSAGE)

        self.write_bytes(IGNORE_FILE, f"{self._log_file}\n".encode("utf-8"))
        self.stage(IGNORE_FILE)
        self.commit(IGNORE_FILE, IGNORE_COMMIT_MESSAGE)

    # ------------------------------------------------------------------
    # Version control
    # ------------------------------------------------------------------

    def stage(self, path: str) -> None:
        self._git("add", "--", path)

    def commit(self, path: str, message: str) -> None:
        self._git("commit", "-m", message, "--", path)

    def is_clean(self) -> bool:
        """True iff nothing is staged. Untracked files and unstaged edits do not count."""
        result = self._run_git("diff", "--cached", "--quiet")
        if result.returncode not in (0, 1):
            detail = result.stderr.strip() or result.stdout.strip()
            raise SubprocessError(f"failed to run git diff: {detail}")
        return result.returncode == 0

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def exists(self, name: str) -> bool:
        return (self._root / name).exists()

    def read_bytes(self, name: str) -> bytes:
        path = self._root / name
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageIOError(f"failed to read {path}: {exc}") from exc

    def write_bytes(self, name: str, data: bytes) -> None:
        path = self._root / name
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise StorageIOError(f"failed to write {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run_git(self, *args: str) -> subprocess.CompletedProcess[str]:
        cmd = [self._git_bin]
        if self._user_name:
            cmd += ["-c", f"user.name={self._user_name}"]
        if self._user_email:
            cmd += ["-c", f"user.email={self._user_email}"]
        cmd += list(args)

        try:
            return subprocess.run(
                cmd,
                cwd=self._root,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            raise SubprocessError(f"failed to run {self._git_bin} {args[0]}: {exc}") from exc

    def _git(self, *args: str) -> str:
        result = self._run_git(*args)
        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise SubprocessError(f"failed to run git {args[0]}: {detail}")
        return result.stdout
