"""Async GitHub REST client for gists, issue comments and commit comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from size_compare import __version__

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
COMMENTS_PAGE_SIZE = 100
DEFAULT_TIMEOUT_SECONDS = 30.0

logger = logging.getLogger(__name__)


class GitHubApiError(Exception):
    """Raised for non-2xx responses and transport failures."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass(slots=True, frozen=True)
class IssueComment:
    """Pull request (issue) comment."""

    id: int
    body: str


class GitHubClient:
    """Thin REST wrapper; one instance per token.

    Must be used as an async context manager so the underlying
    ``httpx.AsyncClient`` is closed.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": f"size-compare/{__version__}",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # Blob store (gist) interface.

    async def get(self, blob_id: str) -> dict[str, str]:
        """Return every file of a gist as name -> content."""
        response = await self._request("GET", f"/gists/{blob_id}")
        payload = response.json()
        raw_files = payload.get("files") if isinstance(payload, dict) else None
        files: dict[str, str] = {}
        if not isinstance(raw_files, dict):
            return files
        for key, item in raw_files.items():
            if not isinstance(item, dict):
                continue
            filename = item.get("filename") or key
            content = item.get("content") or ""
            if item.get("truncated") and isinstance(item.get("raw_url"), str):
                logger.debug("Gist file %s is truncated, fetching raw content", filename)
                content = (await self._request("GET", item["raw_url"])).text
            files[filename] = content
        return files

    async def put(self, blob_id: str, files: dict[str, str]) -> None:
        """Write the given files to a gist; other gist files stay untouched."""
        await self._request(
            "PATCH",
            f"/gists/{blob_id}",
            json={"files": {name: {"content": content} for name, content in files.items()}},
        )

    # Comment interfaces.

    async def list_issue_comments(self, owner: str, repo: str, number: int) -> list[IssueComment]:
        """Return all comments of an issue or pull request, following pagination."""
        comments: list[IssueComment] = []
        url: str | None = f"/repos/{owner}/{repo}/issues/{number}/comments"
        params: dict[str, Any] | None = {"per_page": COMMENTS_PAGE_SIZE}
        while url is not None:
            response = await self._request("GET", url, params=params)
            for item in response.json():
                comments.append(_issue_comment(item))
            url = response.links.get("next", {}).get("url")
            params = None
        return comments

    async def create_issue_comment(
        self, owner: str, repo: str, number: int, body: str
    ) -> IssueComment:
        """Create a new comment on an issue or pull request."""
        response = await self._request(
            "POST", f"/repos/{owner}/{repo}/issues/{number}/comments", json={"body": body}
        )
        return _issue_comment(response.json())

    async def update_issue_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> IssueComment:
        """Replace the body of an existing issue comment."""
        response = await self._request(
            "PATCH", f"/repos/{owner}/{repo}/issues/comments/{comment_id}", json={"body": body}
        )
        return _issue_comment(response.json())

    async def create_commit_comment(self, owner: str, repo: str, sha: str, body: str) -> None:
        """Create a comment attached to a commit."""
        await self._request(
            "POST", f"/repos/{owner}/{repo}/commits/{sha}/comments", json={"body": body}
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as error:
            raise GitHubApiError(f"{method} {url} failed: {error}") from error
        if response.is_error:
            raise GitHubApiError(
                f"{method} {url} returned {response.status_code}: {_error_message(response)}",
                status=response.status_code,
            )
        return response


def _issue_comment(item: object) -> IssueComment:
    if not isinstance(item, dict) or not isinstance(item.get("id"), int):
        raise GitHubApiError("Unexpected comment payload from GitHub API.")
    body = item.get("body")
    return IssueComment(id=item["id"], body=body if isinstance(body, str) else "")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return response.reason_phrase
