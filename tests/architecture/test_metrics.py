"""Tests for Martin metric functions."""

import pytest

from clean_arch.architecture.metrics import (
    MetricSummary,
    compute_abstractness,
    compute_instability,
    compute_main_seq_distance,
    compute_mean,
    compute_overage,
    summarize,
)


class TestComputeAbstractness:
    """A = Na / (Na + Nc)."""

    def test_half_abstract(self):
        assert compute_abstractness(1, 1) == 0.5

    def test_all_concrete(self):
        assert compute_abstractness(0, 4) == 0.0

    def test_nothing_known(self):
        assert compute_abstractness(0, 0) == 0.0

    def test_rounded(self):
        assert compute_abstractness(1, 2) == 0.333


class TestComputeInstability:
    """I = FanOut / (FanIn + FanOut)."""

    def test_stable_module(self):
        # Many incoming, no outgoing -> I = 0
        assert compute_instability(fan_in=10, fan_out=0) == 0.0

    def test_unstable_module(self):
        assert compute_instability(fan_in=0, fan_out=10) == 1.0

    def test_known_value(self):
        assert compute_instability(fan_in=1, fan_out=3) == 0.75

    def test_isolated_module(self):
        assert compute_instability(0, 0) == 0.0


class TestComputeDistance:
    """D = |A + I - 1|."""

    @pytest.mark.parametrize(
        "abstractness,instability,expected",
        [
            (0.0, 1.0, 0.0),  # concrete, unstable: on the line
            (1.0, 0.0, 0.0),  # abstract, stable: on the line
            (0.0, 0.0, 1.0),  # zone of pain
            (1.0, 1.0, 1.0),  # zone of uselessness
            (0.5, 0.75, 0.25),
        ],
    )
    def test_distance(self, abstractness, instability, expected):
        assert compute_main_seq_distance(abstractness, instability) == expected

    def test_bounds(self):
        for a in (0.0, 0.25, 0.5, 1.0):
            for i in (0.0, 0.3, 0.9, 1.0):
                assert 0.0 <= compute_main_seq_distance(a, i) <= 1.0


class TestOverage:
    def test_no_threshold(self):
        assert compute_overage(0.9, None) == 0.0

    def test_within_threshold(self):
        assert compute_overage(0.2, 0.5) == 0.0

    def test_over_threshold(self):
        assert compute_overage(0.8, 0.5) == 0.3


class TestAggregates:
    def test_mean(self):
        assert compute_mean([0.0, 0.2, 0.0]) == 0.067
        assert compute_mean([]) == 0.0

    def test_summary(self):
        summary = summarize([0.0, 0.5, 1.0])
        assert summary.count == 3
        assert summary.mean == 0.5
        assert summary.median == 0.5
        assert summary.maximum == 1.0
        assert summary.p90 == pytest.approx(0.9)

    def test_empty_summary(self):
        assert summarize([]) == MetricSummary()
