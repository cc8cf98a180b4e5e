"""Bus factor: how concentrated commit authorship is."""

import logging

from repometer.collectors.urls import RepositoryRef
from repometer.scoring.base import Metric
from repometer.scoring.factors import FAILED

logger = logging.getLogger(__name__)

# Share of all commits the top contributors must cover
COMMIT_SHARE = 0.5


class BusFactorMetric(Metric):
    """
    Bus factor from commit concentration.

    Contributors are taken in order of commit count (ties keep first-seen
    order) until they cover half of all commits. The fraction of
    contributors needed is doubled, so needing half the team scores 1.0.
    """

    name = "BusFactor"

    @staticmethod
    def score_authorship(authorship: dict[str, int]) -> float:
        """
        Score a mapping of author -> commit count.

        Returns:
            Score in [0, 1], or -1 when there are no commits
        """
        total_commits = sum(authorship.values())
        if total_commits <= 0:
            return FAILED

        counts = sorted(authorship.values(), reverse=True)
        needed = 0
        covered = 0
        for count in counts:
            covered += count
            needed += 1
            if covered >= COMMIT_SHARE * total_commits:
                break

        raw = needed / len(counts)
        return min(raw * 2, 1.0)

    async def compute(self, ref: RepositoryRef) -> float:
        authorship: dict[str, int] = {}
        async for author, count in self.client.list_commits(ref):
            authorship[author] = authorship.get(author, 0) + count

        logger.debug(f"{ref.full_name}: {sum(authorship.values())} commits by {len(authorship)} authors")
        return self.score_authorship(authorship)
