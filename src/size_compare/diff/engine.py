"""Deterministic change detection between two history records."""

from __future__ import annotations

from size_compare.diff.models import Change, ChangeState, SizeDelta
from size_compare.history.models import FileSizes, HistoryRecord


def difference(before: int, after: int) -> float | None:
    """Return the signed percent change from before to after.

    Equal values give 0.0. A zero baseline with a nonzero current value has
    no defined ratio and gives None.
    """
    if before == after:
        return 0.0
    if before == 0:
        return None
    sign = 1 if after > before else -1
    return abs(before - after) / before * sign * 100


def detect_changes(baseline: HistoryRecord | None, current: HistoryRecord) -> list[Change]:
    """Classify every file of current against baseline, then append removals."""
    remaining: dict[str, FileSizes] = dict(baseline.files) if baseline is not None else {}
    changes: list[Change] = []

    for path, now in current.files.items():
        before = remaining.pop(path, None)
        if before is None:
            changes.append(
                Change(
                    path=path,
                    state=ChangeState.ADDED,
                    raw=SizeDelta(before=None, after=now.raw, percent_diff=None),
                    gzip=SizeDelta(before=None, after=now.gzip, percent_diff=None),
                )
            )
            continue
        state = ChangeState.MODIFIED if before.raw != now.raw else ChangeState.UNCHANGED
        changes.append(
            Change(
                path=path,
                state=state,
                raw=_delta(before.raw, now.raw),
                gzip=_delta(before.gzip, now.gzip),
            )
        )

    for path, before in remaining.items():
        changes.append(
            Change(
                path=path,
                state=ChangeState.REMOVED,
                raw=SizeDelta(before=before.raw, after=None, percent_diff=None),
                gzip=SizeDelta(before=before.gzip, after=None, percent_diff=None),
            )
        )
    return changes


def _delta(before: int, after: int) -> SizeDelta:
    return SizeDelta(before=before, after=after, percent_diff=difference(before, after))
