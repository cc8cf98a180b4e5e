"""Shared fakes: an in-memory GitHub API behind httpx.MockTransport."""

import asyncio
import re

import httpx
import pytest

from repometer.collectors.github import GitHubClient

_REPO_PATH_RE = re.compile(r"^/repos/([^/]+)/([^/]+)/(commits|issues|contents)(?:/(.*))?$")


def commit(login=None, name="Someone"):
    """A commits API entry; login=None mimics an unlinked git author."""
    return {
        "sha": "0" * 40,
        "author": {"login": login} if login else None,
        "commit": {"author": {"name": name}},
    }


def issue(number, state="open", pull_request=False):
    data = {
        "number": number,
        "title": f"Issue {number}",
        "state": state,
        "labels": [{"name": "bug"}],
        "created_at": "2024-01-01T00:00:00Z",
        "closed_at": None if state == "open" else "2024-02-01T00:00:00Z",
    }
    if pull_request:
        data["pull_request"] = {"url": "https://api.github.com/pulls/1"}
    return data


class FakeGitHub:
    """Serves /rate_limit, commits, issues and contents from plain Python data."""

    def __init__(self, remaining=5000, commits=None, issues=None, tree=None, status_overrides=None):
        self.remaining = remaining
        self.commits = commits or []
        self.issues = issues or []
        # path -> [(name, type)]
        self.tree = tree if tree is not None else {"": []}
        # path -> status code
        self.status_overrides = status_overrides or {}
        self.requests: list[httpx.Request] = []

    def paths(self):
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.status_overrides:
            return httpx.Response(self.status_overrides[path], json={"message": "error"})

        if path == "/rate_limit":
            core = {"limit": 5000, "remaining": self.remaining, "reset": 1700000000}
            return httpx.Response(200, json={"resources": {"core": core}, "rate": core})

        match = _REPO_PATH_RE.match(path)
        if not match:
            return httpx.Response(404, json={"message": "Not Found"})

        kind = match.group(3)
        if kind == "commits":
            page = int(request.url.params.get("page", "1"))
            per_page = int(request.url.params.get("per_page", "30"))
            return httpx.Response(200, json=self.commits[(page - 1) * per_page : page * per_page])

        if kind == "issues":
            return httpx.Response(200, json=self.issues)

        sub = match.group(4) or ""
        if sub not in self.tree:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(
            200,
            json=[
                {"name": name, "type": kind_, "path": f"{sub}/{name}" if sub else name}
                for name, kind_ in self.tree[sub]
            ],
        )

    def client(self, **kwargs) -> GitHubClient:
        http = httpx.AsyncClient(base_url=GitHubClient.API_BASE, transport=httpx.MockTransport(self.handler))
        return GitHubClient(token="test-token", client=http, **kwargs)


def run(coro):
    return asyncio.run(coro)


async def collect(agen):
    return [item async for item in agen]


@pytest.fixture
def fake_github():
    return FakeGitHub()
