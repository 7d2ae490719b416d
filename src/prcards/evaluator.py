"""Decide whether a pull request's merge state allows moving its cards."""

from __future__ import annotations

from enum import Enum

from .integrations.github.models import MergeState


class Decision(str, Enum):
    MOVE = "move"
    SKIP = "skip"


# Mergeable now, or mergeable with only non-required checks failing
READY_STATES = frozenset({MergeState.CLEAN, MergeState.UNSTABLE})


def decide(state: MergeState | str | None) -> Decision:
    """Return MOVE for ready states, SKIP for everything else (unknown included)."""
    if not isinstance(state, MergeState):
        state = MergeState.from_string(state)
    return Decision.MOVE if state in READY_STATES else Decision.SKIP
