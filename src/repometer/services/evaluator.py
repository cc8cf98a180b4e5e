"""Evaluate every metric for one repository URL."""

import asyncio
import logging
import time
from typing import Optional

from repometer.collectors.git import GitCollector
from repometer.collectors.github import GitHubClient
from repometer.collectors.npm import NpmCollector
from repometer.collectors.urls import RepositoryRef, resolve_repo_url
from repometer.config import Settings
from repometer.errors import InvalidRepositoryUrl
from repometer.scoring.bus_factor import BusFactorMetric
from repometer.scoring.correctness import CorrectnessMetric
from repometer.scoring.engine import NetScorer
from repometer.scoring.factors import MetricResult, NetScoreResult
from repometer.scoring.license import LicenseMetric
from repometer.scoring.ramp_up import RampUpMetric

logger = logging.getLogger(__name__)


def build_metrics(
    client: GitHubClient,
    settings: Settings,
    git: Optional[GitCollector] = None,
) -> dict:
    """Create the four evaluators, keyed by output name."""
    timeout = settings.evaluator_timeout or None
    return {
        "BusFactor": BusFactorMetric(client, timeout=timeout),
        "Correctness": CorrectnessMetric(client, timeout=timeout),
        "RampUp": RampUpMetric(
            client,
            max_depth=settings.tree_max_depth,
            max_dirs=settings.tree_max_dirs,
            timeout=timeout,
        ),
        "License": LicenseMetric(client, git=git or GitCollector(settings.clone_dir), timeout=timeout),
    }


async def resolve_source(url: str, npm: Optional[NpmCollector] = None) -> Optional[RepositoryRef]:
    """
    Resolve a URL to the repository to evaluate.

    npm package pages are looked up in the registry first; anything else is
    parsed directly as host/owner/name.

    Returns:
        RepositoryRef, or None when the URL cannot be resolved
    """
    package_name = NpmCollector.package_name_from_url(url)
    if package_name:
        owns_npm = npm is None
        npm = npm or NpmCollector()
        try:
            pkg = await npm.collect(package_name)
        finally:
            if owns_npm:
                await npm.close()
        if not pkg.repository_url:
            logger.warning(f"npm package {package_name} has no repository URL")
            return None
        url = pkg.repository_url
        logger.info(f"npm package {package_name} -> {url}")

    try:
        return resolve_repo_url(url)
    except InvalidRepositoryUrl as e:
        logger.warning(str(e))
        return None


async def evaluate_repository(
    url: str,
    settings: Optional[Settings] = None,
    client: Optional[GitHubClient] = None,
    git: Optional[GitCollector] = None,
    npm: Optional[NpmCollector] = None,
    scorer: Optional[NetScorer] = None,
) -> NetScoreResult:
    """
    Run all four metrics for a repository concurrently and aggregate them.

    Individual metric failures show up as -1 scores; this function does not
    raise for them.

    Args:
        url: Repository (or npm package) URL
        settings: Runtime settings; read from the environment when omitted
        client: Shared GitHub client (created and closed here when omitted)
        git: Collector used for shallow clones
        npm: Collector used for npm package URLs
        scorer: Net score aggregator

    Returns:
        NetScoreResult for the URL
    """
    start = time.perf_counter()
    settings = settings or Settings.from_env(require_token=client is None)
    scorer = scorer or NetScorer()

    owns_client = client is None
    client = client or GitHubClient(settings.github_token, max_commit_pages=settings.max_commit_pages)
    if not client.is_available():
        logger.warning("No GitHub token configured; unauthenticated rate limits apply")

    try:
        ref = await resolve_source(url, npm)
        if ref is None:
            results = {name: MetricResult.failed() for name in ("BusFactor", "Correctness", "RampUp", "License")}
        else:
            metrics = build_metrics(client, settings, git)
            scores = await asyncio.gather(*(metric.evaluate(ref) for metric in metrics.values()))
            results = dict(zip(metrics, scores))
    finally:
        if owns_client:
            await client.close()

    result = scorer.combine(
        url,
        bus_factor=results["BusFactor"],
        correctness=results["Correctness"],
        ramp_up=results["RampUp"],
        license=results["License"],
        latency=time.perf_counter() - start,
    )
    result.repo = str(ref) if ref else None
    if ref is None:
        result.warnings.append("Could not resolve a repository from the URL")
    return result
