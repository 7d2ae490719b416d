"""Data models for the GitHub integration."""

from __future__ import annotations

from enum import Enum


class MergeState(str, Enum):
    """Values of a pull request's ``mergeable_state`` field."""

    CLEAN = "clean"
    UNSTABLE = "unstable"  # mergeable, non-required checks failing
    HAS_HOOKS = "has_hooks"
    BLOCKED = "blocked"
    BEHIND = "behind"
    DIRTY = "dirty"
    DRAFT = "draft"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str | None) -> MergeState:
        """Parse a mergeable_state value exactly. Missing or unrecognised values are UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN
