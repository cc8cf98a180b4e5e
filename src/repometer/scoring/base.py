"""Common evaluate() contract for all metrics."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Union

from repometer.collectors.github import GitHubClient
from repometer.collectors.urls import RepositoryRef, resolve_repo_url
from repometer.errors import RepometerError
from repometer.scoring.factors import FAILED, MetricResult

logger = logging.getLogger(__name__)


class Metric(ABC):
    """
    A repository metric.

    Subclasses implement compute(); evaluate() adds the shared behaviour:
    latency measurement, the rate-limit pre-check, a deadline, and turning
    any RepometerError into a -1 score so one metric cannot take down the
    others.
    """

    name: str = ""

    def __init__(self, client: GitHubClient, timeout: Optional[float] = 120.0):
        self.client = client
        self.timeout = timeout

    @abstractmethod
    async def compute(self, ref: RepositoryRef) -> float:
        """Return the score for a repository, in [0, 1] or -1."""

    async def _run(self, repository: Union[RepositoryRef, str]) -> float:
        ref = repository if isinstance(repository, RepositoryRef) else resolve_repo_url(repository)
        # Quota is shared with every other evaluator, so it is re-read each time.
        await self.client.ensure_quota()
        return await self.compute(ref)

    async def evaluate(self, repository: Union[RepositoryRef, str]) -> MetricResult:
        """
        Evaluate the metric for a repository.

        Args:
            repository: RepositoryRef or repository URL

        Returns:
            MetricResult with the score (-1 on failure) and wall-clock latency
        """
        start = time.perf_counter()
        try:
            score = await asyncio.wait_for(self._run(repository), timeout=self.timeout)
        except RepometerError as e:
            logger.warning(f"{self.name} failed for {repository}: {e}")
            score = FAILED
        except asyncio.TimeoutError:
            logger.warning(f"{self.name} timed out after {self.timeout}s for {repository}")
            score = FAILED
        latency = time.perf_counter() - start

        logger.info(f"{self.name} for {repository}: {score:.3f} ({latency:.3f}s)")
        return MetricResult(score=score, latency=latency)
