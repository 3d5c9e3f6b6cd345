from __future__ import annotations

from dataclasses import replace

from helpers.fakes import make_record, pull_request_context, push_context

from size_compare.history import HISTORY_SCHEMA_VERSION, HistoryLog
from size_compare.reconcile import EventKind, classify_event, select_baseline


def test_pull_request_wins_over_branch() -> None:
    assert classify_event(pull_request_context()) is EventKind.PULL_REQUEST


def test_push_to_master_branch() -> None:
    assert classify_event(push_context()) is EventKind.MAIN_BRANCH_PUSH


def test_push_to_other_branch_or_tag() -> None:
    assert classify_event(push_context(ref="refs/heads/feature")) is EventKind.OTHER
    assert classify_event(push_context(ref="refs/tags/main")) is EventKind.OTHER


def test_unknown_master_branch_is_other() -> None:
    assert classify_event(replace(push_context(), master_branch=None)) is EventKind.OTHER


def test_select_baseline() -> None:
    log = HistoryLog(
        schema_version=HISTORY_SCHEMA_VERSION,
        records=(make_record("c", {}), make_record("b", {}), make_record("a", {})),
    )

    assert select_baseline(log, "new").commit_sha == "c"
    assert select_baseline(log, "c").commit_sha == "b"
    assert select_baseline(log, "b").commit_sha == "a"
    assert select_baseline(log, "a").commit_sha == "c"
    assert select_baseline(HistoryLog(HISTORY_SCHEMA_VERSION, ()), "new") is None


def test_select_baseline_for_only_record_is_that_record() -> None:
    log = HistoryLog(schema_version=HISTORY_SCHEMA_VERSION, records=(make_record("a", {}),))

    assert select_baseline(log, "a").commit_sha == "a"
