"""Immutable CI event context read from the GitHub Actions environment."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class RepoRef:
    """Repository coordinates."""

    owner: str
    repo: str


@dataclass(slots=True, frozen=True)
class PullRequestRef:
    """Pull request that triggered the run."""

    number: int
    head_sha: str | None = None


@dataclass(slots=True, frozen=True)
class EventContext:
    """Everything the reconciler needs to know about the triggering event."""

    event_name: str
    sha: str
    ref: str
    repo: RepoRef
    master_branch: str | None
    pull_request: PullRequestRef | None = None

    @property
    def current_sha(self) -> str:
        """Return the commit the collected snapshot belongs to."""
        if self.pull_request is not None and self.pull_request.head_sha:
            return self.pull_request.head_sha
        return self.sha


def context_from_payload(
    *,
    event_name: str,
    sha: str,
    ref: str,
    repository: str,
    payload: Mapping[str, object],
) -> EventContext:
    """Build a context from Actions variables and the webhook payload."""
    owner, _, repo = repository.partition("/")
    if not owner or not repo:
        raise ValueError(f"Repository must look like 'owner/repo', got {repository!r}.")
    return EventContext(
        event_name=event_name,
        sha=sha,
        ref=ref,
        repo=RepoRef(owner=owner, repo=repo),
        master_branch=_master_branch(payload.get("repository")),
        pull_request=_pull_request(payload.get("pull_request")),
    )


def load_event_context(environ: Mapping[str, str]) -> EventContext:
    """Read the event context from GITHUB_* variables and the event payload file."""
    for name in ("GITHUB_EVENT_NAME", "GITHUB_SHA", "GITHUB_REPOSITORY"):
        if not environ.get(name):
            raise ValueError(f"Environment variable {name} is required.")
    payload: dict[str, object] = {}
    event_path = environ.get("GITHUB_EVENT_PATH")
    if event_path and Path(event_path).is_file():
        with Path(event_path).open("r", encoding="utf-8") as handle:
            loaded = json.load(handle)
        if isinstance(loaded, dict):
            payload = loaded
    return context_from_payload(
        event_name=environ["GITHUB_EVENT_NAME"],
        sha=environ["GITHUB_SHA"],
        ref=environ.get("GITHUB_REF", ""),
        repository=environ["GITHUB_REPOSITORY"],
        payload=payload,
    )


def _master_branch(repository: object) -> str | None:
    if not isinstance(repository, dict):
        return None
    for key in ("master_branch", "default_branch"):
        value = repository.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _pull_request(pull_request: object) -> PullRequestRef | None:
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    if not isinstance(number, int) or isinstance(number, bool):
        return None
    head = pull_request.get("head")
    head_sha: str | None = None
    if isinstance(head, dict) and isinstance(head.get("sha"), str):
        head_sha = head["sha"]
    return PullRequestRef(number=number, head_sha=head_sha)
