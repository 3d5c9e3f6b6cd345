"""Event-driven reconciliation of size history, comments and annotations."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from size_compare.diff.engine import detect_changes
from size_compare.diff.models import Change
from size_compare.github.client import GitHubApiError, IssueComment
from size_compare.github.context import EventContext, RepoRef
from size_compare.history.log import find_record_index, upsert
from size_compare.history.models import HistoryLog, HistoryRecord
from size_compare.history.store import HistoryStore
from size_compare.logging import JsonlAuditLogger
from size_compare.report.render import (
    REPORT_HEADING,
    REPORT_TITLE,
    render_commit_comment,
    render_notice,
    render_pull_request_comment,
)

logger = logging.getLogger(__name__)

FORK_PERMISSION_HINT = "This can happen for pull requests from a fork without write permissions."


class EventKind(StrEnum):
    """How a run reacts to its triggering event."""

    PULL_REQUEST = "pull_request"
    MAIN_BRANCH_PUSH = "main_branch_push"
    OTHER = "other"


class Snapshotter(Protocol):
    """Produces the current size snapshot."""

    async def snapshot(
        self, patterns: tuple[str, ...], cwd: Path, commit_sha: str
    ) -> HistoryRecord: ...


class IssueComments(Protocol):
    """Pull request comment operations."""

    async def list_issue_comments(
        self, owner: str, repo: str, number: int
    ) -> list[IssueComment]: ...

    async def create_issue_comment(
        self, owner: str, repo: str, number: int, body: str
    ) -> IssueComment: ...

    async def update_issue_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> IssueComment: ...


class CommitComments(Protocol):
    """Commit comment operations."""

    async def create_commit_comment(self, owner: str, repo: str, sha: str, body: str) -> None: ...


class Annotator(Protocol):
    """Non-blocking run annotations."""

    def notice(self, message: str, title: str | None = None) -> None: ...


@dataclass(slots=True, frozen=True)
class ReconcileResult:
    """What one run did."""

    kind: EventKind
    body: str | None = None
    changes: tuple[Change, ...] = ()
    history_written: bool = False
    comment_action: str | None = None


def classify_event(context: EventContext) -> EventKind:
    """Classify the triggering event once per run."""
    if context.pull_request is not None:
        return EventKind.PULL_REQUEST
    if context.master_branch and context.ref == f"refs/heads/{context.master_branch}":
        return EventKind.MAIN_BRANCH_PUSH
    return EventKind.OTHER


def select_baseline(log: HistoryLog, commit_sha: str) -> HistoryRecord | None:
    """Return the record a main branch snapshot for commit_sha is compared to.

    A re-run compares against the record just older than the existing one.
    A first run, or a re-run of the oldest record, falls back to the newest
    record. Only an empty log has no baseline.
    """
    index = find_record_index(log, commit_sha)
    if index is not None and index + 1 < len(log.records):
        return log.records[index + 1]
    return log.latest


class Reconciler:
    """Drives collection, diff, rendering and collaborator calls for one event."""

    def __init__(
        self,
        *,
        collector: Snapshotter,
        history: HistoryStore,
        comments: IssueComments,
        commit_comments: CommitComments,
        annotator: Annotator,
        patterns: tuple[str, ...],
        working_dir: Path,
        server_url: str,
        audit_logger: JsonlAuditLogger | None = None,
    ) -> None:
        self._collector = collector
        self._history = history
        self._comments = comments
        self._commit_comments = commit_comments
        self._annotator = annotator
        self._patterns = patterns
        self._working_dir = working_dir
        self._server_url = server_url
        self._audit_logger = audit_logger

    async def run(self, context: EventContext) -> ReconcileResult:
        """Reconcile one event; OTHER events make no collaborator calls."""
        kind = classify_event(context)
        logger.debug(
            "Event %s on %s (sha=%s, master=%s) classified as %s",
            context.event_name,
            context.ref,
            context.sha,
            context.master_branch,
            kind,
        )
        if kind is EventKind.PULL_REQUEST and context.pull_request is not None:
            return await self._pull_request(context, context.pull_request.number)
        if kind is EventKind.MAIN_BRANCH_PUSH:
            return await self._main_branch_push(context)
        return ReconcileResult(kind=kind)

    async def _pull_request(self, context: EventContext, number: int) -> ReconcileResult:
        loaded = await self._history.load()
        baseline = loaded.log.latest

        lookup = asyncio.create_task(self._find_previous_comment(context.repo, number))
        try:
            current = await self._collector.snapshot(
                self._patterns, self._working_dir, context.current_sha
            )
        except BaseException:
            lookup.cancel()
            await asyncio.gather(lookup, return_exceptions=True)
            raise

        changes = detect_changes(baseline, current)
        logger.debug(
            "Found %d changes between %s and %s",
            len(changes),
            baseline.commit_sha if baseline is not None else "<none>",
            current.commit_sha,
        )
        body = render_pull_request_comment(
            changes,
            server_url=self._server_url,
            owner=context.repo.owner,
            repo=context.repo.repo,
            baseline_sha=baseline.commit_sha if baseline is not None else None,
            current_sha=current.commit_sha,
        )
        previous = await lookup
        comment_action = await self._publish_comment(context, number, previous, body)
        return ReconcileResult(
            kind=EventKind.PULL_REQUEST,
            body=body,
            changes=tuple(changes),
            comment_action=comment_action,
        )

    async def _main_branch_push(self, context: EventContext) -> ReconcileResult:
        loaded = await self._history.load()
        current = await self._collector.snapshot(self._patterns, self._working_dir, context.sha)

        index = find_record_index(loaded.log, context.sha)
        if index is not None:
            logger.debug("Size for commit %s was already recorded", context.sha)
            existing = loaded.log.records[index]
            # Identical sizes keep the stored record, timestamp included.
            if existing.files == current.files:
                current = existing
        else:
            logger.debug("Creating new history record for commit %s", context.sha)

        baseline = select_baseline(loaded.log, context.sha)
        changes = detect_changes(baseline, current)
        updated = upsert(loaded.log, current)

        try:
            written = await self._history.save(loaded, updated)
        except GitHubApiError as error:
            self._audit(context, EventKind.MAIN_BRANCH_PUSH, "history.write", error=error)
            raise
        self._audit(
            context,
            EventKind.MAIN_BRANCH_PUSH,
            "history.write" if written else "history.skip",
            metadata={"records": len(updated.records), "file_name": self._history.file_name},
        )

        notice = render_notice(changes)
        if notice is not None:
            self._annotator.notice(notice, title=REPORT_TITLE)
            self._audit(context, EventKind.MAIN_BRANCH_PUSH, "notice", metadata={"body": notice})

        body = render_commit_comment(
            changes,
            server_url=self._server_url,
            owner=context.repo.owner,
            repo=context.repo.repo,
            baseline_sha=baseline.commit_sha if baseline is not None else None,
            current_sha=current.commit_sha,
        )
        await self._commit_comments.create_commit_comment(
            context.repo.owner, context.repo.repo, context.sha, body
        )
        self._audit(
            context,
            EventKind.MAIN_BRANCH_PUSH,
            "commit_comment.create",
            metadata={"body": body, "sha": context.sha},
        )
        return ReconcileResult(
            kind=EventKind.MAIN_BRANCH_PUSH,
            body=body,
            changes=tuple(changes),
            history_written=written,
        )

    async def _find_previous_comment(self, repo: RepoRef, number: int) -> IssueComment | None:
        comments = await self._comments.list_issue_comments(repo.owner, repo.repo, number)
        for comment in comments:
            if comment.body.startswith(REPORT_HEADING):
                return comment
        return None

    async def _publish_comment(
        self,
        context: EventContext,
        number: int,
        previous: IssueComment | None,
        body: str,
    ) -> str:
        owner, repo = context.repo.owner, context.repo.repo
        if previous is not None:
            logger.debug("Updating previous report comment %d", previous.id)
            action = "pr_comment.update"
            call = self._comments.update_issue_comment(owner, repo, previous.id, body)
        else:
            logger.debug("No previous report comment found, creating a new one")
            action = "pr_comment.create"
            call = self._comments.create_issue_comment(owner, repo, number, body)
        metadata: dict[str, object] = {"body": body, "number": number}
        try:
            await call
        except GitHubApiError as error:
            logger.warning("Error publishing report comment (%s). %s", error, FORK_PERMISSION_HINT)
            self._audit(context, EventKind.PULL_REQUEST, action, metadata=metadata, error=error)
            return f"{action.split('.')[1]}_failed"
        self._audit(context, EventKind.PULL_REQUEST, action, metadata=metadata)
        return "updated" if previous is not None else "created"

    def _audit(
        self,
        context: EventContext,
        kind: EventKind,
        action: str,
        metadata: dict[str, object] | None = None,
        error: GitHubApiError | None = None,
    ) -> None:
        if self._audit_logger is None:
            return
        error_code: str | None = None
        if error is not None:
            error_code = f"HTTP_{error.status}" if error.status is not None else "TRANSPORT"
        self._audit_logger.record(
            commit_sha=context.current_sha,
            event_kind=str(kind),
            action=action,
            metadata=metadata,
            error_code=error_code,
        )
