"""Review workflow state machine.

Enforces valid transitions only (VALID_TRANSITIONS table) and keeps the
transition history of the current run for logging and tests.
"""

from __future__ import annotations

import logging

from buildtrust.models.review import VALID_TRANSITIONS, ReviewState, ReviewTransition

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested state transition is not valid."""


class ReviewMachine:
    """Tracks the review state of a single run."""

    def __init__(self) -> None:
        self._state = ReviewState.START
        self._history: list[ReviewTransition] = []

    @property
    def state(self) -> ReviewState:
        return self._state

    @property
    def history(self) -> list[ReviewTransition]:
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self._state]

    def transition(self, target: ReviewState, pkg_id: str | None = None) -> ReviewTransition:
        """Move to *target*, raising ``InvalidTransitionError`` if not allowed."""
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self._state.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )
        record = ReviewTransition(from_state=self._state, to_state=target, pkg_id=pkg_id)
        logger.debug("review %s: %s->%s", pkg_id or "-", self._state.value, target.value)
        self._history.append(record)
        self._state = target
        return record

    def abort(self, pkg_id: str | None = None) -> None:
        """Move to ABORTED unless the run already reached a terminal state."""
        if not self.is_terminal:
            self.transition(ReviewState.ABORTED, pkg_id)
