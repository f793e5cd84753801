"""
Percentile distributions and classification.

Distributions are rebuilt every run from eligible players only; they are
never cached. Percentiles are rank based: the share of the population that
is strictly below a value.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np

from lycanstats.analysis.metrics import MetricSet
from lycanstats.core.constants import PERCENTILE_THRESHOLDS, PercentileCategory

logger = logging.getLogger(__name__)

NEUTRAL_PERCENTILE = 50.0


@dataclass(frozen=True)
class PercentileResult:
    value: float
    percentile: float
    category: PercentileCategory

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "percentile": round(self.percentile, 2),
            "category": self.category.value,
        }


class DistributionBuilder:
    """Collects sorted per-stat value arrays from eligible players."""

    def __init__(self, stat_keys: Iterable[str]):
        self.stat_keys = list(stat_keys)

    def build(self, metric_sets: Iterable[MetricSet]) -> dict[str, np.ndarray]:
        values: dict[str, list[float]] = {key: [] for key in self.stat_keys}
        for metric_set in metric_sets:
            for key in self.stat_keys:
                value = metric_set.get(key)
                if value is None or math.isnan(value):
                    continue
                values[key].append(float(value))

        distributions = {key: np.sort(np.asarray(vals, dtype=float)) for key, vals in values.items()}
        logger.debug(
            "Built distributions: "
            + ", ".join(f"{key}={len(dist)}" for key, dist in distributions.items())
        )
        return distributions


class PercentileClassifier:
    """Maps a value to a percentile, and a percentile to a category."""

    def __init__(self, thresholds: Mapping[str, float] | None = None):
        merged = dict(PERCENTILE_THRESHOLDS)
        if thresholds:
            merged.update(thresholds)
        self.thresholds = {PercentileCategory(key): float(value) for key, value in merged.items()}

    @staticmethod
    def percentile(value: float, distribution: np.ndarray) -> float:
        """Share (0-100) of the distribution strictly below ``value``; 50 when empty."""
        if len(distribution) == 0:
            return NEUTRAL_PERCENTILE
        rank = int(np.searchsorted(distribution, value, side="left"))
        return rank / len(distribution) * 100

    def category(self, percentile: float) -> PercentileCategory:
        t = self.thresholds
        if percentile >= t[PercentileCategory.EXTREME_HIGH]:
            return PercentileCategory.EXTREME_HIGH
        if percentile >= t[PercentileCategory.HIGH]:
            return PercentileCategory.HIGH
        if percentile >= t[PercentileCategory.ABOVE_AVERAGE]:
            return PercentileCategory.ABOVE_AVERAGE
        if percentile <= t[PercentileCategory.EXTREME_LOW]:
            return PercentileCategory.EXTREME_LOW
        if percentile <= t[PercentileCategory.LOW]:
            return PercentileCategory.LOW
        if percentile <= t[PercentileCategory.BELOW_AVERAGE]:
            return PercentileCategory.BELOW_AVERAGE
        return PercentileCategory.AVERAGE

    def threshold(self, category: PercentileCategory) -> float:
        """Percentile a player has to reach (or stay under) for a category."""
        if category == PercentileCategory.AVERAGE:
            return NEUTRAL_PERCENTILE
        return self.thresholds[category]

    def classify(self, value: float, distribution: np.ndarray) -> PercentileResult:
        percentile = self.percentile(value, distribution)
        return PercentileResult(value=value, percentile=percentile, category=self.category(percentile))

    def classify_player(
        self, metric_set: MetricSet, distributions: Mapping[str, np.ndarray]
    ) -> dict[str, PercentileResult]:
        """Classify every non-null stat of one player."""
        results: dict[str, PercentileResult] = {}
        for key, distribution in distributions.items():
            value = metric_set.get(key)
            if value is None or math.isnan(value):
                continue
            results[key] = self.classify(value, distribution)
        return results
