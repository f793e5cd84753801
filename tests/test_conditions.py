"""Tests for declarative condition evaluation."""

from __future__ import annotations

import pytest

from lycanstats.analysis.conditions import (
    BALANCED,
    SPECIALIST,
    ConditionEvaluator,
    camp_balance_category,
    camp_balance_spread,
)
from lycanstats.analysis.metrics import MetricSet
from lycanstats.analysis.percentiles import PercentileResult
from lycanstats.core.config import TitlesConfig
from lycanstats.core.constants import PercentileCategory
from lycanstats.rules.table import CombinationRule, ConditionSpec, default_rule_table


def _result(percentile: float, category: PercentileCategory, value: float = 1.0) -> PercentileResult:
    return PercentileResult(value=value, percentile=percentile, category=category)


@pytest.fixture
def evaluator():
    return ConditionEvaluator(default_rule_table())


class TestCategoryConditions:
    """Percentile category matching, strict and lenient."""

    def test_high_accepts_extreme_high(self, evaluator):
        metrics = MetricSet(player_id="p", games=30)
        percentiles = {"winRate": _result(90, PercentileCategory.EXTREME_HIGH)}
        result = evaluator.evaluate(metrics, percentiles, ConditionSpec(stat="winRate", category="HIGH"))
        assert result.met
        assert result.gap == pytest.approx(65 - 90)

    def test_strict_high_rejects_above_average(self, evaluator):
        metrics = MetricSet(player_id="p", games=30)
        percentiles = {"winRate": _result(60, PercentileCategory.ABOVE_AVERAGE)}
        strict = evaluator.evaluate(metrics, percentiles, ConditionSpec(stat="winRate", category="HIGH"))
        lenient = evaluator.evaluate(
            metrics,
            percentiles,
            ConditionSpec(stat="winRate", category="HIGH", min_category="ABOVE_AVERAGE"),
        )
        assert not strict.met
        assert strict.gap == pytest.approx(5)
        assert lenient.met

    def test_low_side_gap(self, evaluator):
        metrics = MetricSet(player_id="p", games=30)
        percentiles = {"talkingPer60Min": _result(40, PercentileCategory.BELOW_AVERAGE)}
        result = evaluator.evaluate(metrics, percentiles, ConditionSpec(stat="talking", category="LOW"))
        assert not result.met
        assert result.gap == pytest.approx(40 - 35)

    def test_average_gap_is_distance_to_median(self, evaluator):
        metrics = MetricSet(player_id="p", games=30)
        percentiles = {"winRate": _result(52, PercentileCategory.AVERAGE)}
        result = evaluator.evaluate(metrics, percentiles, ConditionSpec(stat="winRate", category="AVERAGE"))
        assert result.met
        assert result.gap == pytest.approx(2)

    def test_missing_stat_is_not_met(self, evaluator):
        metrics = MetricSet(player_id="p", games=30)
        result = evaluator.evaluate(metrics, {}, ConditionSpec(stat="winRate", category="HIGH"))
        assert not result.met
        assert result.gap is None


class TestMinValueConditions:
    """Raw threshold on the metric value."""

    def test_min_value(self, evaluator):
        metrics = MetricSet(player_id="p", games=120, games_played=120.0)
        met = evaluator.evaluate(metrics, {}, ConditionSpec(stat="gamesPlayed", min_value=100))
        missed = evaluator.evaluate(metrics, {}, ConditionSpec(stat="gamesPlayed", min_value=150))
        assert met.met
        assert not missed.met
        assert missed.gap == pytest.approx(30)


class TestRoleConditions:
    """role<Name> conditions on role frequency."""

    def test_role_frequency(self, evaluator):
        metrics = MetricSet(player_id="p", games=30, role_counts={"Chasseur": 6})
        result = evaluator.evaluate(metrics, {}, ConditionSpec(stat="roleChasseur", category="HIGH"))
        assert result.met
        assert result.current_value == pytest.approx(20.0)

    def test_role_needs_minimum_count(self):
        evaluator = ConditionEvaluator(default_rule_table(), config=TitlesConfig(role_min_count=10))
        metrics = MetricSet(player_id="p", games=30, role_counts={"Chasseur": 6})
        result = evaluator.evaluate(metrics, {}, ConditionSpec(stat="roleChasseur", category="HIGH"))
        assert not result.met


class TestCampBalance:
    """Spread of camp win rates normalised by the expected camp win rate."""

    def test_spread_needs_two_camps(self):
        assert camp_balance_spread(MetricSet(player_id="p", win_rate_villageois=60.0)) is None

    def test_balanced(self, evaluator):
        # deltas: +4, +4, +2 -> spread 2
        metrics = MetricSet(
            player_id="p", win_rate_villageois=56.0, win_rate_loup=32.0, win_rate_solo=22.0
        )
        assert camp_balance_category(camp_balance_spread(metrics)) == BALANCED
        result = evaluator.evaluate(metrics, {}, ConditionSpec(stat="campBalance", category=BALANCED))
        assert result.met

    def test_specialist(self):
        # deltas: +28, -18 -> spread 46
        metrics = MetricSet(player_id="p", win_rate_villageois=80.0, win_rate_loup=10.0)
        assert camp_balance_category(camp_balance_spread(metrics)) == SPECIALIST

    def test_between_thresholds(self):
        assert camp_balance_category(12.0) is None


class TestRuleEvaluation:
    """All conditions of a rule must hold."""

    def test_all_conditions_required(self, evaluator):
        rule = CombinationRule(
            id="test",
            title="Test",
            conditions=(
                ConditionSpec(stat="winRate", category="HIGH"),
                ConditionSpec(stat="talking", category="LOW"),
            ),
            priority=10,
        )
        metrics = MetricSet(player_id="p", games=30)
        percentiles = {
            "winRate": _result(80, PercentileCategory.HIGH),
            "talkingPer60Min": _result(10, PercentileCategory.EXTREME_LOW),
        }
        met, results = evaluator.evaluate_rule(metrics, percentiles, rule)
        assert met
        assert len(results) == 2

        percentiles["talkingPer60Min"] = _result(50, PercentileCategory.AVERAGE)
        met, _ = evaluator.evaluate_rule(metrics, percentiles, rule)
        assert not met
