"""Capability interfaces the review workflow calls into.

Any object with the right method satisfies each protocol, so tests
substitute deterministic fakes for the real editor, terminal and
package manager.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.prompt import Prompt

from buildtrust.core.errors import SubprocessError
from buildtrust.models.packages import BuildHook

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class MetadataProvider(Protocol):
    """Yields the build hooks of a dependency tree, in review order."""

    def build_hooks(self) -> list[BuildHook]: ...


@runtime_checkable
class EditorLauncher(Protocol):
    """Opens a file for human review and blocks until the editor exits."""

    def launch(self, path: Path) -> int:
        """Return the editor's exit status."""
        ...


@runtime_checkable
class ConfirmationPrompt(Protocol):
    """Asks the operator a question and returns the raw answer."""

    def ask(self, message: str) -> str: ...


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------


class SubprocessEditorLauncher:
    """Runs the configured editor on the hook file.

    Parameters
    ----------
    editor:
        Editor command line, e.g. ``vim`` or ``code --wait``. Split with
        ``shlex`` so arguments are honored.
    """

    def __init__(self, editor: str) -> None:
        self._argv = shlex.split(editor)
        if not self._argv:
            raise SubprocessError("the editor command is empty")

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    def launch(self, path: Path) -> int:
        cmd = [*self._argv, str(path)]
        logger.debug("launch editor: %s", cmd)
        try:
            return subprocess.run(cmd).returncode
        except OSError as exc:
            raise SubprocessError(f"failed to launch the editor ({self._argv[0]}): {exc}") from exc


class ConsolePrompt:
    """Asks on the terminal via Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def ask(self, message: str) -> str:
        return Prompt.ask(message, console=self._console, default="", show_default=False)


def parse_confirmation(answer: str) -> bool:
    """Interpret an operator answer: ``y``/``yes`` (any case) is trust, anything else is not."""
    return answer.strip().lower() in ("y", "yes")
