"""Data collectors for various sources."""

from repometer.collectors.git import GitCollector
from repometer.collectors.github import GitHubClient, IssueData, RateLimitStatus, TreeEntry
from repometer.collectors.npm import NpmCollector
from repometer.collectors.urls import RepositoryRef, resolve_repo_url

__all__ = [
    "GitCollector",
    "GitHubClient",
    "IssueData",
    "NpmCollector",
    "RateLimitStatus",
    "RepositoryRef",
    "TreeEntry",
    "resolve_repo_url",
]
