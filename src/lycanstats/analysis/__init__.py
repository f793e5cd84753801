"""
lycanstats Analysis - Metrics, percentiles, titles and achievements.

This module contains:
- metrics: Raw totals folding and derived per-player metrics
- percentiles: Distributions and percentile categories
- conditions: Declarative title condition evaluation
- titles: Claim collection and unique title assignment
- achievements: Tiered achievement evaluators
"""

from lycanstats.analysis.achievements import AchievementEngine, PlayerAchievements
from lycanstats.analysis.conditions import ConditionEvaluator, ConditionResult
from lycanstats.analysis.metrics import MetricAggregator, MetricSet, MetricTotals
from lycanstats.analysis.percentiles import (
    DistributionBuilder,
    PercentileClassifier,
    PercentileResult,
)
from lycanstats.analysis.titles import TitleAssigner, TitleClaim, TitlesResult

__all__: list[str] = [
    "AchievementEngine",
    "PlayerAchievements",
    "ConditionEvaluator",
    "ConditionResult",
    "MetricAggregator",
    "MetricSet",
    "MetricTotals",
    "DistributionBuilder",
    "PercentileClassifier",
    "PercentileResult",
    "TitleAssigner",
    "TitleClaim",
    "TitlesResult",
]
