"""Typed models for size changes between two snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ChangeState(StrEnum):
    """Classification of one file between baseline and current snapshot."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(slots=True, frozen=True)
class SizeDelta:
    """Before/after byte counts on one axis with the signed percent change."""

    before: int | None
    after: int | None
    percent_diff: float | None


@dataclass(slots=True, frozen=True)
class Change:
    """Per-file change on both the raw and gzip axes."""

    path: str
    state: ChangeState
    raw: SizeDelta
    gzip: SizeDelta

    @property
    def significant(self) -> bool:
        """Return True for anything other than an unchanged file."""
        return self.state is not ChangeState.UNCHANGED
