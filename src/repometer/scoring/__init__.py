"""Metric evaluators and net score aggregation."""

from repometer.scoring.base import Metric
from repometer.scoring.bus_factor import BusFactorMetric
from repometer.scoring.correctness import CorrectnessMetric
from repometer.scoring.engine import DEFAULT_WEIGHTS, NetScorer
from repometer.scoring.factors import FAILED, MetricResult, NetScoreResult
from repometer.scoring.license import LicenseMetric
from repometer.scoring.ramp_up import ChecklistTerm, EntryKind, RampUpMetric

__all__ = [
    "BusFactorMetric",
    "ChecklistTerm",
    "CorrectnessMetric",
    "DEFAULT_WEIGHTS",
    "EntryKind",
    "FAILED",
    "LicenseMetric",
    "Metric",
    "MetricResult",
    "NetScoreResult",
    "NetScorer",
    "RampUpMetric",
]
