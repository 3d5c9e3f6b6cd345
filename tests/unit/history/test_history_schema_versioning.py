from __future__ import annotations

import json

import pytest
from helpers.fakes import make_record

from size_compare.history import (
    EMPTY_HISTORY_TEXT,
    HISTORY_SCHEMA_VERSION,
    HistoryLog,
    HistorySchemaError,
    SchemaError,
    empty_history,
    load_history,
    parse_history,
    serialize,
)


def _payload(history: list[object], schema: object = HISTORY_SCHEMA_VERSION) -> str:
    return json.dumps({"schemaVersion": schema, "history": history})


def test_schema_version_mismatch_returns_schema_error() -> None:
    result = parse_history(_payload([], schema=999))

    assert isinstance(result, SchemaError)
    assert "999" in result.reason
    assert f"expected {HISTORY_SCHEMA_VERSION}" in result.reason


def test_load_history_raises_on_schema_mismatch() -> None:
    with pytest.raises(HistorySchemaError, match="unsupported"):
        load_history(_payload([], schema=0))


@pytest.mark.parametrize(
    ("raw_text", "fragment"),
    [
        ("not json", "not valid JSON"),
        ("[]", "JSON object"),
        (json.dumps({"history": []}), "schemaVersion"),
        (json.dumps({"schemaVersion": True, "history": []}), "schemaVersion"),
        (json.dumps({"schemaVersion": HISTORY_SCHEMA_VERSION}), "'history'"),
        (_payload(["nope"]), "history[0]"),
        (_payload([{"timestampMillis": 1, "files": {}}]), "history[0].commitSha"),
        (_payload([{"commitSha": "a", "timestampMillis": "1", "files": {}}]), "timestampMillis"),
        (_payload([{"commitSha": "a", "timestampMillis": 1, "files": []}]), "history[0].files"),
        (
            _payload([{"commitSha": "a", "timestampMillis": 1, "files": {"x.js": {"raw": 1}}}]),
            ".gzip",
        ),
        (
            _payload(
                [{"commitSha": "a", "timestampMillis": 1, "files": {"x.js": {"raw": -1, "gzip": 1}}}]
            ),
            ".raw",
        ),
        (
            _payload(
                [{"commitSha": "a", "timestampMillis": 1, "files": {"x.js": {"raw": 1.5, "gzip": 1}}}]
            ),
            ".raw",
        ),
        (
            _payload(
                [
                    {"commitSha": "a", "timestampMillis": 2, "files": {}},
                    {"commitSha": "a", "timestampMillis": 1, "files": {}},
                ]
            ),
            "duplicates",
        ),
    ],
)
def test_malformed_history_is_rejected_without_raising(raw_text: str, fragment: str) -> None:
    result = parse_history(raw_text)

    assert isinstance(result, SchemaError)
    assert fragment in result.reason


def test_valid_history_parses_newest_first() -> None:
    raw_text = _payload(
        [
            {"commitSha": "b", "timestampMillis": 2, "files": {"x.js": {"raw": 12, "gzip": 4}}},
            {"commitSha": "a", "timestampMillis": 1, "files": {"x.js": {"raw": 10, "gzip": 3}}},
        ]
    )

    log = load_history(raw_text)

    assert [record.commit_sha for record in log.records] == ["b", "a"]
    assert log.latest is not None
    assert log.latest.files["x.js"].raw == 12
    assert log.latest.files["x.js"].gzip == 4


def test_serialize_round_trip_and_canonical_form() -> None:
    log = HistoryLog(
        schema_version=HISTORY_SCHEMA_VERSION,
        records=(
            make_record("b", {"z.js": 30, "a.js": 20}, timestamp_ms=2),
            make_record("a", {"a.js": 10}, timestamp_ms=1),
        ),
    )

    text = serialize(log)

    assert load_history(text) == log
    assert serialize(load_history(text)) == text
    assert text.endswith("\n")
    assert text.index('"a.js"') < text.index('"z.js"')


def test_empty_history_text_is_canonical() -> None:
    assert load_history(EMPTY_HISTORY_TEXT) == empty_history()
    assert json.loads(EMPTY_HISTORY_TEXT) == {
        "history": [],
        "schemaVersion": HISTORY_SCHEMA_VERSION,
    }
