"""Metric result structures."""

from dataclasses import dataclass, field
from typing import Optional

# Sentinel score for "could not be computed"
FAILED = -1.0


def _rounded(value: float, digits: int = 3) -> float:
    return round(value, digits)


@dataclass(frozen=True)
class MetricResult:
    """Score of a single metric and how long its evaluation took."""

    score: float
    latency: float = 0.0  # seconds, evaluate() only

    @classmethod
    def failed(cls, latency: float = 0.0) -> "MetricResult":
        return cls(score=FAILED, latency=latency)

    @property
    def is_failed(self) -> bool:
        return self.score < 0


@dataclass
class NetScoreResult:
    """Complete evaluation of one repository."""

    url: str
    bus_factor: MetricResult
    correctness: MetricResult
    ramp_up: MetricResult
    license: MetricResult
    net_score: float = FAILED
    latency: float = 0.0  # seconds, whole evaluation
    repo: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def components(self) -> dict[str, MetricResult]:
        return {
            "BusFactor": self.bus_factor,
            "Correctness": self.correctness,
            "RampUp": self.ramp_up,
            "License": self.license,
        }

    def to_dict(self) -> dict:
        """Convert to the NDJSON record printed for each URL."""
        record = {
            "URL": self.url,
            "NetScore": _rounded(self.net_score),
            "NetScore_Latency": _rounded(self.latency),
        }
        for key in ("RampUp", "Correctness", "BusFactor", "License"):
            result = self.components[key]
            record[key] = _rounded(result.score)
            record[f"{key}_Latency"] = _rounded(result.latency)
        return record
