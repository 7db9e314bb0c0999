"""Review workflow state machine models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ReviewState(str, Enum):
    """States a single build hook passes through during a run."""

    START = "start"
    CHECK_TRUST = "check_trust"
    SKIP = "skip"
    REVIEW = "review"
    RECORD = "record"
    NEXT = "next"
    DONE = "done"
    ABORTED = "aborted"


# Valid state transitions, enforced by ReviewMachine.
# ABORTED is reachable from every non-terminal state; DONE and ABORTED are terminal.
VALID_TRANSITIONS: dict[ReviewState, set[ReviewState]] = {
    ReviewState.START: {ReviewState.CHECK_TRUST, ReviewState.DONE, ReviewState.ABORTED},
    ReviewState.CHECK_TRUST: {ReviewState.SKIP, ReviewState.REVIEW, ReviewState.ABORTED},
    ReviewState.SKIP: {ReviewState.NEXT, ReviewState.ABORTED},
    ReviewState.REVIEW: {ReviewState.RECORD, ReviewState.ABORTED},
    ReviewState.RECORD: {ReviewState.NEXT, ReviewState.ABORTED},
    ReviewState.NEXT: {ReviewState.CHECK_TRUST, ReviewState.DONE, ReviewState.ABORTED},
    ReviewState.DONE: set(),
    ReviewState.ABORTED: set(),
}


class ReviewTransition(BaseModel):
    """Records a single state transition for the run's audit trail."""

    model_config = ConfigDict(frozen=True)

    from_state: ReviewState
    to_state: ReviewState
    pkg_id: str | None = None


class ReviewSummary(BaseModel):
    """Aggregate outcome of one review run."""

    model_config = ConfigDict(frozen=True)

    hooks: int = 0
    skipped: int = 0
    reviewed: int = 0
    trusted: int = 0
    untrusted: int = 0
    changes: int = 0
    ledger_saved: bool = False
