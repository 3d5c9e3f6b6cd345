"""In-memory GitHub REST API served through httpx.MockTransport."""

from __future__ import annotations

import json

import httpx


class FakeGitHubApi:
    def __init__(self, gist_files: dict[str, str] | None = None) -> None:
        self.gist_files: dict[str, str] = dict(gist_files or {})
        self.issue_comments: list[dict[str, object]] = []
        self.commit_comments: list[tuple[str, str]] = []
        self.requests: list[tuple[str, str, str | None]] = []
        self._next_id = 1

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        token = request.headers.get("Authorization")
        self.requests.append((request.method, path, token))
        body = json.loads(request.content) if request.content else {}
        parts = path.strip("/").split("/")

        if parts[:2] == ["gists", "g1"]:
            if request.method == "GET":
                files = {
                    name: {"filename": name, "content": content}
                    for name, content in self.gist_files.items()
                }
                return httpx.Response(200, json={"id": "g1", "files": files})
            if request.method == "PATCH":
                for name, item in body["files"].items():
                    self.gist_files[name] = item["content"]
                return httpx.Response(200, json={"id": "g1"})
        if parts[-1] == "comments" and parts[-3] == "issues" and request.method == "GET":
            return httpx.Response(200, json=self.issue_comments)
        if parts[-1] == "comments" and parts[-3] == "issues" and request.method == "POST":
            comment = {"id": self._next_id, "body": body["body"]}
            self._next_id += 1
            self.issue_comments.append(comment)
            return httpx.Response(201, json=comment)
        if parts[-3:-1] == ["issues", "comments"] and request.method == "PATCH":
            for comment in self.issue_comments:
                if comment["id"] == int(parts[-1]):
                    comment["body"] = body["body"]
                    return httpx.Response(200, json=comment)
            return httpx.Response(404, json={"message": "Not Found"})
        if parts[-1] == "comments" and parts[-3] == "commits":
            self.commit_comments.append((parts[-2], body["body"]))
            return httpx.Response(201, json={"id": 999, "body": body["body"]})
        return httpx.Response(404, json={"message": "Not Found"})
