"""Net score aggregation."""

import logging
from typing import Optional

from repometer.scoring.factors import FAILED, MetricResult, NetScoreResult

logger = logging.getLogger(__name__)

# Relative importance of each metric, in percent. Normalized before use.
DEFAULT_WEIGHTS = {
    "BusFactor": 19.84,
    "Correctness": 7.47,
    "RampUp": 30.69,
    "License": 42.0,
}


class NetScorer:
    """
    Weighted combination of the four metric scores.

    NetScore = sum(w_i * score_i) with the weights normalized to sum to 1,
    clamped to [-1, 1]. A component that could not be computed (-1) makes
    the whole net score -1 instead of being averaged in.
    """

    def __init__(self, weights: Optional[dict[str, float]] = None):
        weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        missing = set(DEFAULT_WEIGHTS) - set(weights)
        if missing:
            raise ValueError(f"Missing weights for {sorted(missing)}")
        if any(w < 0 for w in weights.values()):
            raise ValueError("Weights must not be negative")

        total = sum(weights[name] for name in DEFAULT_WEIGHTS)
        if total <= 0:
            raise ValueError("Weights must not all be zero")
        self.weights = {name: weights[name] / total for name in DEFAULT_WEIGHTS}

    def calculate(self, scores: dict[str, float]) -> float:
        """
        Combine component scores into the net score.

        Args:
            scores: Score per metric name (BusFactor, Correctness, RampUp, License)

        Returns:
            Net score in [0, 1], or -1 if any component failed
        """
        if any(scores[name] < 0 for name in self.weights):
            return FAILED

        net = sum(self.weights[name] * scores[name] for name in self.weights)
        return max(-1.0, min(1.0, net))

    def combine(
        self,
        url: str,
        bus_factor: MetricResult,
        correctness: MetricResult,
        ramp_up: MetricResult,
        license: MetricResult,
        latency: float = 0.0,
    ) -> NetScoreResult:
        """Build the NetScoreResult for one repository."""
        result = NetScoreResult(
            url=url,
            bus_factor=bus_factor,
            correctness=correctness,
            ramp_up=ramp_up,
            license=license,
            latency=latency,
        )
        result.net_score = self.calculate({name: r.score for name, r in result.components.items()})

        failed = [name for name, r in result.components.items() if r.is_failed]
        if failed:
            result.warnings.append(f"Unavailable metrics: {', '.join(failed)}")
            logger.info(f"Net score for {url} unavailable: {', '.join(failed)} failed")
        return result
