"""Tests for net score aggregation and result structures."""

import pytest

from repometer.scoring.engine import DEFAULT_WEIGHTS, NetScorer
from repometer.scoring.factors import FAILED, MetricResult, NetScoreResult


def _scores(bus=1.0, correctness=1.0, ramp_up=1.0, license=1.0):
    return {"BusFactor": bus, "Correctness": correctness, "RampUp": ramp_up, "License": license}


class TestNetScorer:
    """Tests for NetScorer."""

    def setup_method(self):
        self.scorer = NetScorer()

    def test_weights_normalized(self):
        assert sum(self.scorer.weights.values()) == pytest.approx(1.0)

    def test_weight_order(self):
        w = self.scorer.weights
        assert w["License"] > w["RampUp"] > w["BusFactor"] > w["Correctness"]

    def test_all_perfect(self):
        assert self.scorer.calculate(_scores()) == pytest.approx(1.0)

    def test_all_zero(self):
        assert self.scorer.calculate(_scores(0, 0, 0, 0)) == 0.0

    def test_weighted_sum(self):
        total = sum(DEFAULT_WEIGHTS.values())
        expected = (
            DEFAULT_WEIGHTS["BusFactor"] * 0.4
            + DEFAULT_WEIGHTS["Correctness"] * 0.889
            + DEFAULT_WEIGHTS["RampUp"] * 0.6
            + DEFAULT_WEIGHTS["License"] * 1.0
        ) / total
        assert self.scorer.calculate(_scores(0.4, 0.889, 0.6, 1.0)) == pytest.approx(expected)

    def test_failed_component_propagates(self):
        assert self.scorer.calculate(_scores(license=FAILED)) == FAILED
        assert self.scorer.calculate(_scores(bus=FAILED, correctness=0.5)) == FAILED

    def test_deterministic(self):
        scores = _scores(0.3, 0.7, 0.2, 1.0)
        assert self.scorer.calculate(scores) == self.scorer.calculate(dict(scores))

    def test_custom_weights(self):
        scorer = NetScorer({"BusFactor": 1, "Correctness": 1, "RampUp": 1, "License": 1})
        assert scorer.calculate(_scores(0, 0, 1, 1)) == pytest.approx(0.5)

    def test_missing_weight_rejected(self):
        with pytest.raises(ValueError):
            NetScorer({"BusFactor": 1.0})

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            NetScorer({"BusFactor": -1, "Correctness": 1, "RampUp": 1, "License": 1})

    def test_combine_records_warning(self):
        result = self.scorer.combine(
            "https://github.com/owner/repo",
            bus_factor=MetricResult(0.4, 0.1),
            correctness=MetricResult.failed(0.2),
            ramp_up=MetricResult(0.6, 0.3),
            license=MetricResult(1.0, 0.4),
            latency=0.5,
        )
        assert result.net_score == FAILED
        assert "Correctness" in result.warnings[0]


class TestNetScoreResult:
    """Tests for the NDJSON record."""

    def test_to_dict(self):
        result = NetScoreResult(
            url="https://github.com/owner/repo",
            bus_factor=MetricResult(0.4, 0.12345),
            correctness=MetricResult(1 - 1 / 9, 0.2),
            ramp_up=MetricResult(0.6, 0.3),
            license=MetricResult(1.0, 1.5),
            net_score=0.75,
            latency=1.6,
        )
        d = result.to_dict()
        assert d["URL"] == "https://github.com/owner/repo"
        assert d["NetScore"] == 0.75
        assert d["Correctness"] == 0.889
        assert d["BusFactor_Latency"] == 0.123
        assert d["License_Latency"] == 1.5
        assert set(d) == {
            "URL", "NetScore", "NetScore_Latency",
            "RampUp", "RampUp_Latency", "Correctness", "Correctness_Latency",
            "BusFactor", "BusFactor_Latency", "License", "License_Latency",
        }

    def test_metric_result_failed(self):
        assert MetricResult.failed().is_failed
        assert not MetricResult(0.0).is_failed
