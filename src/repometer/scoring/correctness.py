"""Correctness: open vs. total bug reports."""

import logging

from repometer.collectors.github import IssueData
from repometer.collectors.urls import RepositoryRef
from repometer.scoring.base import Metric

logger = logging.getLogger(__name__)

BUG_LABEL = "bug"


class CorrectnessMetric(Metric):
    """1 - open/total over one page of bug-labeled issues."""

    name = "Correctness"

    @staticmethod
    def score_issues(issues: list[IssueData]) -> float:
        if not issues:
            return 1.0
        open_bugs = sum(1 for issue in issues if issue.is_open)
        return 1.0 - open_bugs / len(issues)

    async def compute(self, ref: RepositoryRef) -> float:
        issues = await self.client.list_issues(ref, label=BUG_LABEL, state="all")
        logger.debug(f"{ref.full_name}: {len(issues)} bug issues")
        return self.score_issues(issues)
