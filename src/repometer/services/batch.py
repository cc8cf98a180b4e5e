"""Batch evaluation of a file of repository URLs."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from repometer.collectors.git import GitCollector
from repometer.collectors.github import GitHubClient
from repometer.collectors.npm import NpmCollector
from repometer.config import Settings
from repometer.scoring.factors import NetScoreResult
from repometer.services.evaluator import evaluate_repository

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Summary of a batch run."""

    total: int = 0
    scored: int = 0
    failed: int = 0
    results: list[NetScoreResult] = field(default_factory=list)


def load_url_file(path: str) -> list[str]:
    """Read one URL per line, skipping blank lines and # comments."""
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.strip().startswith("#")]


async def batch_evaluate(
    urls: list[str],
    settings: Settings,
    max_concurrent: Optional[int] = None,
    client: Optional[GitHubClient] = None,
    progress_callback: Optional[Callable[[int, int, NetScoreResult], None]] = None,
) -> BatchResult:
    """
    Evaluate many URLs with bounded concurrency.

    Args:
        urls: Repository URLs, evaluated in parallel
        settings: Runtime settings
        max_concurrent: Maximum repositories in flight (defaults to settings)
        client: Shared GitHub client (created and closed here when omitted)
        progress_callback: Optional callback(completed, total, result)

    Returns:
        BatchResult with results in the same order as urls
    """
    result = BatchResult(total=len(urls))
    semaphore = asyncio.Semaphore(max(1, max_concurrent or settings.max_concurrent))
    completed = 0

    owns_client = client is None
    client = client or GitHubClient(settings.github_token, max_commit_pages=settings.max_commit_pages)
    git = GitCollector(settings.clone_dir)

    async def evaluate_one(url: str, npm: NpmCollector) -> NetScoreResult:
        nonlocal completed
        async with semaphore:
            scored = await evaluate_repository(url, settings=settings, client=client, git=git, npm=npm)
        completed += 1
        if progress_callback:
            progress_callback(completed, result.total, scored)
        return scored

    try:
        async with NpmCollector() as npm:
            result.results = list(await asyncio.gather(*(evaluate_one(url, npm) for url in urls)))
    finally:
        if owns_client:
            await client.close()

    for scored in result.results:
        if scored.net_score >= 0:
            result.scored += 1
        else:
            result.failed += 1

    logger.info(f"Batch done: {result.scored} scored, {result.failed} without net score")
    return result
