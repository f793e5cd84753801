"""
Evaluation of declarative title conditions.

A condition is matched against a player's classified metrics in this order:
raw ``min_value`` threshold, role frequency (``role<Name>``), the synthetic
``campBalance`` stat, and finally percentile category matching.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from lycanstats.analysis.metrics import MetricSet
from lycanstats.analysis.percentiles import PercentileClassifier, PercentileResult
from lycanstats.core.config import TitlesConfig
from lycanstats.core.constants import (
    CAMP_BALANCED_MAX_SPREAD,
    CAMP_SPECIALIST_MIN_SPREAD,
    EXPECTED_WIN_RATES,
    LOW_SIDE_CATEGORIES,
    PercentileCategory,
)
from lycanstats.rules.table import (
    CAMP_BALANCE_STAT,
    ROLE_STAT_PREFIX,
    CombinationRule,
    ConditionSpec,
    RuleTable,
)

logger = logging.getLogger(__name__)

BALANCED = "BALANCED"
SPECIALIST = "SPECIALIST"


@dataclass(frozen=True)
class ConditionResult:
    met: bool
    current_value: float | None = None
    current_percentile: float | None = None
    gap: float | None = None
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "met": self.met,
            "currentValue": self.current_value,
            "currentPercentile": self.current_percentile,
            "gap": self.gap,
            "reason": self.reason,
        }


def camp_balance_spread(metric_set: MetricSet) -> float | None:
    """
    Spread between the best and worst camp performance.

    Each present camp win rate is normalised by the camp's expected win rate;
    at least two camps are needed.
    """
    deltas = [rate - EXPECTED_WIN_RATES[camp] for camp, rate in metric_set.camp_win_rates().items()]
    if len(deltas) < 2:
        return None
    return max(deltas) - min(deltas)


def camp_balance_category(spread: float | None) -> str | None:
    if spread is None:
        return None
    if spread <= CAMP_BALANCED_MAX_SPREAD:
        return BALANCED
    if spread > CAMP_SPECIALIST_MIN_SPREAD:
        return SPECIALIST
    return None


class ConditionEvaluator:
    """Evaluates single conditions and whole combination rules."""

    def __init__(
        self,
        rules: RuleTable,
        classifier: PercentileClassifier | None = None,
        config: TitlesConfig | None = None,
    ):
        self.rules = rules
        self.classifier = classifier or PercentileClassifier()
        self.config = config or TitlesConfig()

    def evaluate(
        self,
        metrics: MetricSet,
        percentiles: Mapping[str, PercentileResult],
        condition: ConditionSpec,
        role_counts: Mapping[str, int] | None = None,
    ) -> ConditionResult:
        if role_counts is None:
            role_counts = metrics.role_counts

        if condition.min_value is not None:
            return self._evaluate_min_value(metrics, role_counts, condition)

        if condition.stat.startswith(ROLE_STAT_PREFIX):
            return self._evaluate_role(metrics, role_counts, condition.stat)

        if condition.stat == CAMP_BALANCE_STAT:
            return self._evaluate_camp_balance(metrics, condition)

        return self._evaluate_category(percentiles, condition)

    def evaluate_rule(
        self,
        metrics: MetricSet,
        percentiles: Mapping[str, PercentileResult],
        rule: CombinationRule,
    ) -> tuple[bool, list[ConditionResult]]:
        """All conditions must hold (AND)."""
        results = [self.evaluate(metrics, percentiles, condition) for condition in rule.conditions]
        return all(result.met for result in results), results

    # ------------------------------------------------------------------
    # Resolution branches
    # ------------------------------------------------------------------

    def _role_percentage(
        self, metrics: MetricSet, role_counts: Mapping[str, int], stat: str
    ) -> tuple[float | None, int]:
        wanted = stat[len(ROLE_STAT_PREFIX):].lower()
        for role, key in self.rules.role_title_keys.items():
            if wanted in (key.lower(), role.lower()):
                count = role_counts.get(role, 0)
                if metrics.games <= 0:
                    return None, count
                return count / metrics.games * 100, count
        return None, 0

    def _evaluate_min_value(
        self, metrics: MetricSet, role_counts: Mapping[str, int], condition: ConditionSpec
    ) -> ConditionResult:
        if condition.stat.startswith(ROLE_STAT_PREFIX):
            value, _ = self._role_percentage(metrics, role_counts, condition.stat)
        else:
            stat_key = self.rules.resolve_stat(condition.stat)
            value = metrics.get(stat_key) if stat_key else None

        if value is None:
            return ConditionResult(met=False, reason="stat not available")

        met = value >= condition.min_value
        return ConditionResult(
            met=met,
            current_value=value,
            gap=condition.min_value - value,
            reason="" if met else f"{condition.stat} below {condition.min_value}",
        )

    def _evaluate_role(
        self, metrics: MetricSet, role_counts: Mapping[str, int], stat: str
    ) -> ConditionResult:
        percentage, count = self._role_percentage(metrics, role_counts, stat)
        if percentage is None:
            return ConditionResult(met=False, reason="role not available")

        min_pct = self.config.role_min_percentage
        met = percentage >= min_pct and count >= self.config.role_min_count
        return ConditionResult(
            met=met,
            current_value=percentage,
            gap=min_pct - percentage,
            reason="" if met else f"played {count} times ({percentage:.1f}%)",
        )

    def _evaluate_camp_balance(self, metrics: MetricSet, condition: ConditionSpec) -> ConditionResult:
        spread = camp_balance_spread(metrics)
        if spread is None:
            return ConditionResult(met=False, reason="fewer than 2 camp win rates")

        if condition.category == BALANCED:
            met = spread <= CAMP_BALANCED_MAX_SPREAD
            gap = spread - CAMP_BALANCED_MAX_SPREAD
        else:
            met = spread > CAMP_SPECIALIST_MIN_SPREAD
            gap = CAMP_SPECIALIST_MIN_SPREAD - spread
        return ConditionResult(
            met=met,
            current_value=spread,
            gap=gap,
            reason="" if met else f"camp spread {spread:.1f}",
        )

    def _evaluate_category(
        self, percentiles: Mapping[str, PercentileResult], condition: ConditionSpec
    ) -> ConditionResult:
        stat_key = self.rules.resolve_stat(condition.stat)
        result = percentiles.get(stat_key) if stat_key else None
        if result is None:
            return ConditionResult(met=False, reason="stat not available")

        required = PercentileCategory(condition.category)
        lenient = condition.min_category is not None
        current = result.category

        if required == PercentileCategory.HIGH:
            accepted = {PercentileCategory.HIGH, PercentileCategory.EXTREME_HIGH}
            if lenient:
                accepted.add(PercentileCategory.ABOVE_AVERAGE)
        elif required == PercentileCategory.LOW:
            accepted = {PercentileCategory.LOW, PercentileCategory.EXTREME_LOW}
            if lenient:
                accepted.add(PercentileCategory.BELOW_AVERAGE)
        else:
            accepted = {required}

        target = required
        if lenient and required == PercentileCategory.HIGH:
            target = PercentileCategory.ABOVE_AVERAGE
        elif lenient and required == PercentileCategory.LOW:
            target = PercentileCategory.BELOW_AVERAGE

        threshold = self.classifier.threshold(target)
        if target in LOW_SIDE_CATEGORIES:
            gap = result.percentile - threshold
        elif target == PercentileCategory.AVERAGE:
            gap = abs(result.percentile - threshold)
        else:
            gap = threshold - result.percentile

        met = current in accepted
        return ConditionResult(
            met=met,
            current_value=result.value,
            current_percentile=result.percentile,
            gap=gap,
            reason="" if met else f"{condition.stat} is {current.value}",
        )
