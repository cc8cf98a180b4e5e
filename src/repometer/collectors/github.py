"""GitHub REST API client - rate limit, commits, issues, contents."""

import logging
import os
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional
from urllib.parse import quote

import httpx

from repometer.collectors.base import BaseCollector
from repometer.collectors.urls import RepositoryRef
from repometer.errors import RateLimitExhausted, RemoteFetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitStatus:
    """Current core API quota."""

    remaining: int
    limit: int
    reset_at: datetime

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0


@dataclass
class IssueData:
    """Extracted issue data."""

    number: int
    title: str
    state: str
    labels: list[str]
    created_at: str = ""
    closed_at: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.state == "open"


@dataclass(frozen=True)
class TreeEntry:
    """One child of a directory in the repository tree."""

    name: str
    type: str  # "file" or "dir"
    path: str

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


class GitHubClient(BaseCollector):
    """Client for the GitHub REST API.

    Calls are never retried: any failure surfaces as RemoteFetchError (or
    RateLimitExhausted when the quota ran out) and the caller decides.
    """

    API_BASE = "https://api.github.com"
    PER_PAGE = 100
    MAX_COMMIT_PAGES = 10

    def __init__(
        self,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_commit_pages: int = MAX_COMMIT_PAGES,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token. Defaults to GITHUB_TOKEN env var.
            client: Preconfigured httpx client (the caller keeps ownership)
            max_commit_pages: Ceiling on commit history pages fetched
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.max_commit_pages = max_commit_pages
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=self.API_BASE, timeout=30.0)

        # Sent per request so an injected client is left untouched
        self.headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    def is_available(self) -> bool:
        """Check if GitHub token is available."""
        return bool(self.token)

    @staticmethod
    def _check_host(ref: RepositoryRef) -> None:
        if ref.host != "github.com" and not ref.host.endswith(".github.com"):
            raise RemoteFetchError(f"Unsupported repository host: {ref.host}")

    async def _get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """GET request to the REST API, returning decoded JSON."""
        logger.debug(f"GET {endpoint} {params or ''}")
        try:
            response = await self.client.get(endpoint, params=params, headers=self.headers)
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"GitHub API error on {endpoint}: {e}") from e

        if response.status_code in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            raise RateLimitExhausted(f"GitHub rate limit exhausted on {endpoint}")

        if response.is_error:
            raise RemoteFetchError(
                f"GitHub API returned {response.status_code} for {endpoint}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(f"Malformed JSON from {endpoint}") from e

    async def get_rate_limit_status(self) -> RateLimitStatus:
        """Query the current core quota (does not count against it)."""
        data = await self._get("/rate_limit")
        core = (data.get("resources") or {}).get("core") or data.get("rate") or {}
        try:
            status = RateLimitStatus(
                remaining=max(int(core["remaining"]), 0),
                limit=int(core["limit"]),
                reset_at=datetime.fromtimestamp(int(core["reset"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteFetchError(f"Unexpected rate limit payload: {core!r}") from e

        logger.debug(f"Rate limit: {status.remaining}/{status.limit}, resets {status.reset_at:%H:%M:%S}")
        return status

    async def ensure_quota(self) -> RateLimitStatus:
        """Read the quota and raise RateLimitExhausted if nothing is left."""
        status = await self.get_rate_limit_status()
        if status.exhausted:
            raise RateLimitExhausted(
                f"GitHub quota exhausted ({status.limit} calls), resets at {status.reset_at.isoformat()}"
            )
        return status

    @staticmethod
    def _commit_author(commit: dict) -> str:
        """Identity of a commit's author: GitHub login, else git author name."""
        account = commit.get("author") or {}
        if account.get("login"):
            return account["login"]
        git_author = (commit.get("commit") or {}).get("author") or {}
        return git_author.get("name") or "unknown"

    async def list_commits(self, ref: RepositoryRef) -> AsyncIterator[tuple[str, int]]:
        """
        Page through commit history yielding (author, count) per page.

        Pages are requested lazily, at most max_commit_pages of them; a page
        with fewer than PER_PAGE commits is the last one.

        Args:
            ref: Repository to list

        Yields:
            (author, commits in this page) in first-seen order
        """
        self._check_host(ref)
        page = 1

        while page <= self.max_commit_pages:
            data = await self._get(
                f"/repos/{ref.owner}/{ref.name}/commits",
                params={"per_page": self.PER_PAGE, "page": page},
            )
            if not isinstance(data, list) or not data:
                break

            counts = Counter(self._commit_author(c) for c in data)
            for author, count in counts.items():
                yield author, count

            if len(data) < self.PER_PAGE:
                break

            page += 1
        else:
            logger.info(f"Stopped commit paging for {ref.full_name} at {self.max_commit_pages} pages")

    async def list_issues(self, ref: RepositoryRef, label: str = "bug", state: str = "all") -> list[IssueData]:
        """
        Get one page of issues matching a label and state.

        Only the most recently updated page is fetched, so callers get an
        approximation of the tracker, not its full history.

        Args:
            ref: Repository to query
            label: Label filter
            state: Issue state filter (all, open, closed)

        Returns:
            List of IssueData objects (pull requests excluded)
        """
        self._check_host(ref)
        data = await self._get(
            f"/repos/{ref.owner}/{ref.name}/issues",
            params={"labels": label, "state": state, "per_page": self.PER_PAGE},
        )
        if not isinstance(data, list):
            raise RemoteFetchError(f"Unexpected issues payload for {ref.full_name}")

        return [
            IssueData(
                number=issue.get("number", 0),
                title=issue.get("title", ""),
                state=issue.get("state", ""),
                labels=[lbl.get("name", "") for lbl in issue.get("labels", []) if isinstance(lbl, dict)],
                created_at=issue.get("created_at", ""),
                closed_at=issue.get("closed_at"),
            )
            for issue in data
            if "pull_request" not in issue
        ]

    async def get_tree_entries(self, ref: RepositoryRef, path: str = "") -> list[TreeEntry]:
        """List the immediate children of a directory ('' is the root)."""
        self._check_host(ref)
        endpoint = f"/repos/{ref.owner}/{ref.name}/contents"
        if path:
            segments = path.strip("/").split("/")
            endpoint = f"{endpoint}/" + "/".join(quote(seg, safe="") for seg in segments)

        data = await self._get(endpoint)
        if not isinstance(data, list):
            raise RemoteFetchError(f"{ref.full_name}:{path or '/'} is not a directory")

        return [
            TreeEntry(
                name=item.get("name", ""),
                type="dir" if item.get("type") == "dir" else "file",
                path=item.get("path", ""),
            )
            for item in data
        ]

    async def close(self):
        """Close the HTTP client."""
        if self._owns_client:
            await self.client.aclose()
