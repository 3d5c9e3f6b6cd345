"""Typed models for size history state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class SizeEntry:
    """Measured size of one artifact file."""

    path: str
    raw: int
    gzip: int


@dataclass(slots=True, frozen=True)
class FileSizes:
    """Raw and gzip byte counts stored per file in a history record."""

    raw: int
    gzip: int


@dataclass(slots=True, frozen=True)
class HistoryRecord:
    """Size snapshot of all tracked files for one commit."""

    commit_sha: str
    timestamp_ms: int
    files: dict[str, FileSizes]

    @classmethod
    def from_entries(
        cls, commit_sha: str, timestamp_ms: int, entries: list[SizeEntry]
    ) -> HistoryRecord:
        """Build a record from collected entries, keeping their order."""
        return cls(
            commit_sha=commit_sha,
            timestamp_ms=timestamp_ms,
            files={entry.path: FileSizes(raw=entry.raw, gzip=entry.gzip) for entry in entries},
        )


@dataclass(slots=True, frozen=True)
class HistoryLog:
    """Versioned newest-first sequence of history records."""

    schema_version: int
    records: tuple[HistoryRecord, ...]

    @property
    def latest(self) -> HistoryRecord | None:
        """Return the newest record, if any."""
        if not self.records:
            return None
        return self.records[0]


@dataclass(slots=True, frozen=True)
class SchemaError:
    """Failure arm of a history parse."""

    reason: str
