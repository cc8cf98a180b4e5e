"""Tests for the GitHub API client."""

import httpx
import pytest

from conftest import FakeGitHub, collect, commit, issue, run
from repometer.collectors.github import GitHubClient
from repometer.collectors.urls import RepositoryRef
from repometer.errors import RateLimitExhausted, RemoteFetchError

REF = RepositoryRef("owner", "repo")


class TestRateLimit:
    """Tests for rate limit reading."""

    def test_reads_core_quota(self):
        fake = FakeGitHub(remaining=42)
        status = run(fake.client().get_rate_limit_status())
        assert status.remaining == 42
        assert status.limit == 5000
        assert status.reset_at.tzinfo is not None
        assert not status.exhausted

    def test_ensure_quota_raises_when_exhausted(self):
        fake = FakeGitHub(remaining=0)
        with pytest.raises(RateLimitExhausted):
            run(fake.client().ensure_quota())

    def test_malformed_payload(self):
        def handler(request):
            return httpx.Response(200, json={"resources": {}})

        http = httpx.AsyncClient(base_url=GitHubClient.API_BASE, transport=httpx.MockTransport(handler))
        with pytest.raises(RemoteFetchError):
            run(GitHubClient(token="t", client=http).get_rate_limit_status())


class TestRequests:
    """Tests for error mapping and headers."""

    def test_sends_bearer_token(self):
        fake = FakeGitHub()
        run(fake.client().get_rate_limit_status())
        assert fake.requests[0].headers["Authorization"] == "Bearer test-token"

    def test_not_found_raises(self):
        fake = FakeGitHub(tree={})
        with pytest.raises(RemoteFetchError) as excinfo:
            run(fake.client().get_tree_entries(REF))
        assert excinfo.value.status_code == 404

    def test_rate_limited_response_raises(self):
        def handler(request):
            return httpx.Response(403, headers={"X-RateLimit-Remaining": "0"}, json={})

        http = httpx.AsyncClient(base_url=GitHubClient.API_BASE, transport=httpx.MockTransport(handler))
        with pytest.raises(RateLimitExhausted):
            run(GitHubClient(token="t", client=http).list_issues(REF))

    def test_transport_error_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        http = httpx.AsyncClient(base_url=GitHubClient.API_BASE, transport=httpx.MockTransport(handler))
        with pytest.raises(RemoteFetchError):
            run(GitHubClient(token="t", client=http).get_rate_limit_status())

    def test_unsupported_host(self):
        fake = FakeGitHub()
        with pytest.raises(RemoteFetchError):
            run(fake.client().list_issues(RepositoryRef("group", "project", host="gitlab.com")))

    def test_lookalike_host_rejected(self):
        fake = FakeGitHub()
        with pytest.raises(RemoteFetchError):
            run(fake.client().list_issues(RepositoryRef("owner", "repo", host="notgithub.com")))
        assert fake.requests == []

    def test_injected_client_headers_untouched(self):
        fake = FakeGitHub()
        client = fake.client()
        run(client.get_rate_limit_status())
        assert "Authorization" not in client.client.headers
        assert fake.requests[0].headers["Accept"] == "application/vnd.github.v3+json"


class TestListCommits:
    """Tests for commit paging."""

    def test_aggregates_per_page(self):
        fake = FakeGitHub(commits=[commit("alice"), commit("bob"), commit("alice")])
        pairs = run(collect(fake.client().list_commits(REF)))
        assert pairs == [("alice", 2), ("bob", 1)]

    def test_unlinked_author_falls_back_to_git_name(self):
        fake = FakeGitHub(commits=[commit(None, name="Ghost Writer")])
        assert run(collect(fake.client().list_commits(REF))) == [("Ghost Writer", 1)]

    def test_short_page_ends_history(self):
        fake = FakeGitHub(commits=[commit("alice")] * 250)
        pairs = run(collect(fake.client().list_commits(REF)))
        assert sum(count for _, count in pairs) == 250
        assert sum(1 for p in fake.paths() if p.endswith("/commits")) == 3

    def test_page_ceiling(self):
        fake = FakeGitHub(commits=[commit("alice")] * 500)
        pairs = run(collect(fake.client(max_commit_pages=2).list_commits(REF)))
        assert sum(count for _, count in pairs) == 200
        assert sum(1 for p in fake.paths() if p.endswith("/commits")) == 2

    def test_empty_history(self):
        fake = FakeGitHub(commits=[])
        assert run(collect(fake.client().list_commits(REF))) == []


class TestListIssues:
    """Tests for issue listing."""

    def test_sends_label_and_state(self):
        fake = FakeGitHub(issues=[issue(1)])
        run(fake.client().list_issues(REF, label="bug", state="all"))
        params = fake.requests[0].url.params
        assert params["labels"] == "bug"
        assert params["state"] == "all"
        assert params["per_page"] == "100"

    def test_drops_pull_requests(self):
        fake = FakeGitHub(issues=[issue(1), issue(2, pull_request=True), issue(3, "closed")])
        issues = run(fake.client().list_issues(REF))
        assert [i.number for i in issues] == [1, 3]
        assert issues[0].is_open
        assert issues[0].labels == ["bug"]


class TestTreeEntries:
    """Tests for directory listing."""

    def test_root_listing(self):
        fake = FakeGitHub(tree={"": [("README.md", "file"), ("src", "dir"), ("link", "symlink")]})
        entries = run(fake.client().get_tree_entries(REF))
        assert [(e.name, e.type) for e in entries] == [("README.md", "file"), ("src", "dir"), ("link", "file")]
        assert fake.paths() == ["/repos/owner/repo/contents"]

    def test_subdirectory_listing(self):
        fake = FakeGitHub(tree={"src": [("main.py", "file")]})
        entries = run(fake.client().get_tree_entries(REF, "src"))
        assert entries[0].path == "src/main.py"
        assert fake.paths() == ["/repos/owner/repo/contents/src"]

    def test_subdirectory_with_reserved_characters(self):
        fake = FakeGitHub(tree={"C#/a b": [("Program.cs", "file")]})
        entries = run(fake.client().get_tree_entries(REF, "C#/a b"))
        assert [e.name for e in entries] == ["Program.cs"]
        assert fake.requests[0].url.raw_path == b"/repos/owner/repo/contents/C%23/a%20b"
