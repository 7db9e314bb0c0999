"""Shared test fixtures for buildtrust."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from buildtrust.core.archive import (
    EMPTY_LEDGER,
    IGNORE_COMMIT_MESSAGE,
    IGNORE_FILE,
    INITIAL_COMMIT_MESSAGE,
    LEDGER_FILE,
    LOG_FILE,
)
from buildtrust.core.errors import StorageIOError, SubprocessError
from buildtrust.core.trust_ledger import TrustLedger
from buildtrust.models.packages import BuildHook, PackageIdentity

HOOK_SOURCE = b'fn main() {\n    println!("cargo:rerun-if-changed=build.rs");\n}\n'


# ---------------------------------------------------------------------------
# Fakes for the capability interfaces
# ---------------------------------------------------------------------------


class FakeArchive:
    """In-memory ``VersionedArchive`` that mimics git's staging semantics."""

    def __init__(self, root: Path = Path("/fake/archive")) -> None:
        self._root = root
        self.files: dict[str, bytes] = {}
        self.committed: dict[str, bytes] = {}
        self.staged: set[str] = set()
        self.commits: list[tuple[str, str]] = []
        self.initialized = False

    @property
    def root(self) -> Path:
        return self._root

    def ensure_initialized(self) -> None:
        if self.initialized:
            return
        self.initialized = True
        self.write_bytes(LEDGER_FILE, EMPTY_LEDGER)
        self.stage(LEDGER_FILE)
        self.commit(LEDGER_FILE, INITIAL_COMMIT_MESSAGE)
        self.write_bytes(IGNORE_FILE, f"{LOG_FILE}\n".encode())
        self.stage(IGNORE_FILE)
        self.commit(IGNORE_FILE, IGNORE_COMMIT_MESSAGE)

    def stage(self, path: str) -> None:
        if path not in self.files:
            raise SubprocessError(f"pathspec '{path}' did not match any files")
        if self.files[path] != self.committed.get(path):
            self.staged.add(path)

    def commit(self, path: str, message: str) -> None:
        if path not in self.staged:
            raise SubprocessError(f"nothing to commit for {path}")
        self.committed[path] = self.files[path]
        self.staged.discard(path)
        self.commits.append((path, message))

    def is_clean(self) -> bool:
        # Only staged changes count, as with `git diff --cached`
        return not self.staged

    def exists(self, name: str) -> bool:
        return name in self.files

    def read_bytes(self, name: str) -> bytes:
        if name not in self.files:
            raise StorageIOError(f"failed to read {self._root / name}: not found")
        return self.files[name]

    def write_bytes(self, name: str, data: bytes) -> None:
        self.files[name] = data

    def commit_messages(self) -> list[str]:
        return [message for _, message in self.commits]


class FakeProvider:
    """``MetadataProvider`` returning a fixed hook list."""

    def __init__(self, hooks: list[BuildHook]) -> None:
        self.hooks = hooks
        self.calls = 0

    def build_hooks(self) -> list[BuildHook]:
        self.calls += 1
        return list(self.hooks)


class FakeLauncher:
    """``EditorLauncher`` recording every launched path."""

    def __init__(self, status: int = 0) -> None:
        self.status = status
        self.launched: list[Path] = []

    def launch(self, path: Path) -> int:
        self.launched.append(path)
        return self.status


class ScriptedPrompt:
    """``ConfirmationPrompt`` replaying scripted answers in order."""

    def __init__(self, *answers: str) -> None:
        self._answers = list(answers)
        self.messages: list[str] = []

    def ask(self, message: str) -> str:
        self.messages.append(message)
        if not self._answers:
            raise AssertionError(f"unexpected prompt: {message}")
        return self._answers.pop(0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def archive() -> FakeArchive:
    """Provide a fresh, uninitialized in-memory archive."""
    return FakeArchive()


@pytest.fixture
def ledger() -> TrustLedger:
    """Provide an empty TrustLedger."""
    return TrustLedger()


@pytest.fixture
def make_hook(tmp_path: Path) -> Callable[..., BuildHook]:
    """Factory fixture: write a build.rs for ``name@version`` and return its hook."""

    def _factory(name: str = "pkg", version: str = "1.0", content: bytes = HOOK_SOURCE) -> BuildHook:
        src_dir = tmp_path / "registry" / f"{name}-{version}"
        src_dir.mkdir(parents=True, exist_ok=True)
        hook_path = src_dir / "build.rs"
        hook_path.write_bytes(content)
        return BuildHook(package=PackageIdentity(name=name, version=version), hook_path=hook_path)

    return _factory


@pytest.fixture
def fake_provider_cls() -> type[FakeProvider]:
    return FakeProvider


@pytest.fixture
def fake_launcher_cls() -> type[FakeLauncher]:
    return FakeLauncher


@pytest.fixture
def scripted_prompt_cls() -> type[ScriptedPrompt]:
    return ScriptedPrompt


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the operator's editor and cargo home out of every test."""
    for var in (
        "EDITOR",
        "BUILDTRUST_EDITOR",
        "BUILDTRUST_ARCHIVE_PATH",
        "BUILDTRUST_FETCH",
        "BUILDTRUST_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CARGO_HOME", str(tmp_path / "cargo-home"))
    monkeypatch.chdir(tmp_path)
