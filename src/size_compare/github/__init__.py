"""GitHub REST, event context and workflow command integrations."""

from .client import DEFAULT_API_URL, GitHubApiError, GitHubClient, IssueComment
from .context import (
    EventContext,
    PullRequestRef,
    RepoRef,
    context_from_payload,
    load_event_context,
)
from .workflow import WorkflowCommandHandler, WorkflowCommands, format_command

__all__ = [
    "DEFAULT_API_URL",
    "EventContext",
    "GitHubApiError",
    "GitHubClient",
    "IssueComment",
    "PullRequestRef",
    "RepoRef",
    "WorkflowCommandHandler",
    "WorkflowCommands",
    "context_from_payload",
    "format_command",
    "load_event_context",
]
