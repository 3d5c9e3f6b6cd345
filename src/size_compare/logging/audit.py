"""Structured JSONL audit log of external actions taken by a run."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Sanitized representation of one external action."""

    timestamp: str
    commit_sha: str
    event_kind: str
    action: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_metadata(metadata: dict[str, object]) -> dict[str, object]:
    """Keep identifiers and counters, reduce free text to presence and length."""
    sanitized: dict[str, object] = {}
    for key in sorted(metadata.keys()):
        value = metadata[key]
        if key in {"owner", "repo", "sha", "baseline_sha", "file_name"} and isinstance(
            value, str
        ):
            sanitized[key] = value
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, (list, tuple)):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value.keys())
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlAuditLogger:
    """Appends one sanitized JSON line per external action of a run."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def record(
        self,
        *,
        commit_sha: str,
        event_kind: str,
        action: str,
        metadata: dict[str, object] | None = None,
        error_code: str | None = None,
    ) -> AuditEvent:
        """Timestamp, sanitize and append an action; a set error_code marks it failed."""
        event = AuditEvent(
            timestamp=utc_timestamp(),
            commit_sha=commit_sha,
            event_kind=event_kind,
            action=action,
            ok=error_code is None,
            error_code=error_code,
            metadata=sanitize_metadata(metadata or {}),
        )
        self.append(event)
        return event

    def append(self, event: AuditEvent) -> None:
        line = json.dumps(asdict(event), sort_keys=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")
