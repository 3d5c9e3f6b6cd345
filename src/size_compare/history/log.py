"""Strict parsing, canonical serialization and upsert for history logs."""

from __future__ import annotations

import json

from size_compare.history.models import FileSizes, HistoryLog, HistoryRecord, SchemaError

HISTORY_SCHEMA_VERSION = 1


class HistorySchemaError(Exception):
    """Raised when stored history does not match the supported schema."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def empty_history() -> HistoryLog:
    """Return a log with no records at the supported schema version."""
    return HistoryLog(schema_version=HISTORY_SCHEMA_VERSION, records=())


def parse_history(raw_text: str) -> HistoryLog | SchemaError:
    """Parse stored history text, returning SchemaError instead of raising."""
    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as error:
        return SchemaError(reason=f"History is not valid JSON: {error.msg}.")
    if not isinstance(payload, dict):
        return SchemaError(reason="History must be a JSON object.")

    schema = payload.get("schemaVersion")
    if not _is_int(schema):
        return SchemaError(reason="Field 'schemaVersion' must be an integer.")
    if schema != HISTORY_SCHEMA_VERSION:
        return SchemaError(
            reason=(
                f"Stored history schema {schema} is unsupported; "
                f"expected {HISTORY_SCHEMA_VERSION}."
            )
        )

    raw_records = payload.get("history")
    if not isinstance(raw_records, list):
        return SchemaError(reason="Field 'history' must be a list.")

    records: list[HistoryRecord] = []
    seen: set[str] = set()
    for index, item in enumerate(raw_records):
        parsed = _parse_record(item, f"history[{index}]")
        if isinstance(parsed, SchemaError):
            return parsed
        if parsed.commit_sha in seen:
            return SchemaError(
                reason=f"Field 'history[{index}].commitSha' duplicates {parsed.commit_sha!r}."
            )
        seen.add(parsed.commit_sha)
        records.append(parsed)
    return HistoryLog(schema_version=schema, records=tuple(records))


def load_history(raw_text: str) -> HistoryLog:
    """Parse stored history text or raise HistorySchemaError."""
    parsed = parse_history(raw_text)
    if isinstance(parsed, SchemaError):
        raise HistorySchemaError(parsed.reason)
    return parsed


def serialize(log: HistoryLog) -> str:
    """Return deterministic JSON text for a history log."""
    payload = {
        "schemaVersion": log.schema_version,
        "history": [_record_payload(record) for record in log.records],
    }
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


EMPTY_HISTORY_TEXT = serialize(empty_history())


def find_record_index(log: HistoryLog, commit_sha: str) -> int | None:
    """Return the position of the record for a commit, if present."""
    for index, record in enumerate(log.records):
        if record.commit_sha == commit_sha:
            return index
    return None


def find_record(log: HistoryLog, commit_sha: str) -> HistoryRecord | None:
    """Return the record for a commit, if present."""
    index = find_record_index(log, commit_sha)
    if index is None:
        return None
    return log.records[index]


def upsert(log: HistoryLog, record: HistoryRecord) -> HistoryLog:
    """Replace the record for the same commit in place, or prepend it."""
    index = find_record_index(log, record.commit_sha)
    if index is None:
        records = (record, *log.records)
    else:
        records = (*log.records[:index], record, *log.records[index + 1 :])
    return HistoryLog(schema_version=log.schema_version, records=records)


def _record_payload(record: HistoryRecord) -> dict[str, object]:
    return {
        "commitSha": record.commit_sha,
        "timestampMillis": record.timestamp_ms,
        "files": {
            path: {"raw": sizes.raw, "gzip": sizes.gzip} for path, sizes in record.files.items()
        },
    }


def _parse_record(item: object, where: str) -> HistoryRecord | SchemaError:
    if not isinstance(item, dict):
        return SchemaError(reason=f"Field '{where}' must be an object.")
    commit_sha = item.get("commitSha")
    timestamp_ms = item.get("timestampMillis")
    files = item.get("files")
    if not isinstance(commit_sha, str) or not commit_sha:
        return SchemaError(reason=f"Field '{where}.commitSha' must be a non-empty string.")
    if not _is_int(timestamp_ms):
        return SchemaError(reason=f"Field '{where}.timestampMillis' must be an integer.")
    if not isinstance(files, dict):
        return SchemaError(reason=f"Field '{where}.files' must be an object.")

    output: dict[str, FileSizes] = {}
    for path, sizes in files.items():
        if not isinstance(sizes, dict):
            return SchemaError(reason=f"Field '{where}.files[{path!r}]' must be an object.")
        raw = sizes.get("raw")
        gzip = sizes.get("gzip")
        if not _is_size(raw):
            return SchemaError(
                reason=f"Field '{where}.files[{path!r}].raw' must be a non-negative integer."
            )
        if not _is_size(gzip):
            return SchemaError(
                reason=f"Field '{where}.files[{path!r}].gzip' must be a non-negative integer."
            )
        output[path] = FileSizes(raw=raw, gzip=gzip)
    return HistoryRecord(commit_sha=commit_sha, timestamp_ms=timestamp_ms, files=output)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_size(value: object) -> bool:
    return _is_int(value) and value >= 0
