"""
Title claims and global primary-title assignment.

Each eligible player collects claims (basic, camp balance, combination,
camp assignment, role). Combination claims are narrowed to the best-fitting
claimants, then one primary title per player is chosen by a single greedy
pass over all claims sorted by strength, so that each title id is primary
for at most one player.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from lycanstats.analysis.conditions import (
    BALANCED,
    SPECIALIST,
    ConditionEvaluator,
    camp_balance_category,
    camp_balance_spread,
)
from lycanstats.analysis.metrics import MetricSet
from lycanstats.analysis.percentiles import (
    NEUTRAL_PERCENTILE,
    DistributionBuilder,
    PercentileClassifier,
    PercentileResult,
)
from lycanstats.core.config import TitlesConfig
from lycanstats.core.constants import LOW_SIDE_CATEGORIES, Camp, PercentileCategory
from lycanstats.rules.table import CAMP_BALANCE_STAT, RuleTable

logger = logging.getLogger(__name__)

# Category -> (title variants to try, priority)
BASIC_TITLE_VARIANTS: dict[PercentileCategory, tuple[tuple[str, ...], int]] = {
    PercentileCategory.EXTREME_HIGH: (("extremeHigh", "high"), 8),
    PercentileCategory.HIGH: (("high",), 6),
    PercentileCategory.ABOVE_AVERAGE: (("aboveAverage", "average"), 4),
    PercentileCategory.AVERAGE: (("average",), 3),
    PercentileCategory.BELOW_AVERAGE: (("belowAverage", "average"), 4),
    PercentileCategory.LOW: (("low",), 6),
    PercentileCategory.EXTREME_LOW: (("extremeLow", "low"), 8),
}

CAMP_BALANCE_PRIORITY = 6
CAMP_ASSIGNMENT_PRIORITY = 3
ROLE_TITLE_PRIORITY = 3


class TitleType:
    BASIC = "basic"
    CAMP_BALANCE = "campBalance"
    COMBINATION = "combination"
    CAMP_ASSIGNMENT = "campAssignment"
    ROLE = "role"


@dataclass(frozen=True)
class TitleClaim:
    """A (player, title) match with its evidence."""

    id: str
    type: str
    title: str
    priority: int
    emoji: str = ""
    description: str = ""
    stat: str | None = None
    value: float | None = None
    percentile: float | None = None
    category: str | None = None
    conditions: tuple[dict[str, Any], ...] = ()
    role_count: int | None = None
    role_percentage: float | None = None
    adjusted_percentile: float = NEUTRAL_PERCENTILE
    claim_strength: float = 0.0
    primary_owner: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "emoji": self.emoji,
            "description": self.description,
            "type": self.type,
            "priority": self.priority,
        }
        if self.stat is not None:
            data["stat"] = self.stat
        if self.value is not None:
            data["value"] = self.value
        if self.percentile is not None:
            data["percentile"] = round(self.percentile, 2)
        if self.category is not None:
            data["category"] = self.category
        if self.conditions:
            data["conditions"] = list(self.conditions)
        if self.role_count is not None:
            data["roleCount"] = self.role_count
            data["rolePercentage"] = round(self.role_percentage or 0.0, 2)
        if self.primary_owner is not None:
            data["primaryOwner"] = self.primary_owner
        return data


@dataclass
class PlayerTitles:
    player_id: str
    player_name: str
    games_played: int
    titles: list[TitleClaim] = field(default_factory=list)
    primary_title: TitleClaim | None = None
    percentiles: dict[str, PercentileResult] = field(default_factory=dict)
    stats: dict[str, float | None] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "gamesPlayed": self.games_played,
            "titles": [title.to_dict() for title in self.titles],
            "primaryTitle": self.primary_title.to_dict() if self.primary_title else None,
            "percentiles": {key: result.to_dict() for key, result in self.percentiles.items()},
            "stats": dict(self.stats),
        }


@dataclass
class AssignmentResult:
    """Output of the global greedy pass."""

    claims: dict[str, list[TitleClaim]]
    primary: dict[str, TitleClaim | None]
    owners: dict[str, str]
    fallback_count: int = 0

    @property
    def unique_count(self) -> int:
        return len(self.owners)


@dataclass
class TitlesResult:
    players: dict[str, PlayerTitles]
    eligible_count: int
    fallback_count: int
    unique_count: int


# ============================================================================
# Assigner
# ============================================================================


class TitleAssigner:
    """Builds claims for eligible players and assigns unique primary titles."""

    def __init__(
        self,
        rules: RuleTable,
        config: TitlesConfig | None = None,
    ):
        self.rules = rules
        self.config = config or TitlesConfig()
        self.classifier = PercentileClassifier(self.config.percentile_thresholds)
        self.evaluator = ConditionEvaluator(rules, self.classifier, self.config)

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def is_eligible(self, metric_set: MetricSet) -> bool:
        return metric_set.games >= self.config.min_games

    def generate(self, metric_sets: Mapping[str, MetricSet]) -> TitlesResult:
        eligible = {
            player_id: metric_sets[player_id]
            for player_id in sorted(metric_sets)
            if self.is_eligible(metric_sets[player_id])
        }
        logger.info(
            f"{len(eligible)} players eligible for titles ({self.config.min_games}+ games) "
            f"out of {len(metric_sets)}"
        )

        distributions = DistributionBuilder(self.rules.stat_keys).build(eligible.values())
        percentiles = {
            player_id: self.classifier.classify_player(metric_set, distributions)
            for player_id, metric_set in eligible.items()
        }

        claims = {
            player_id: self.collect_claims(metric_set, percentiles[player_id])
            for player_id, metric_set in eligible.items()
        }
        claims = self.narrow_combinations(claims)
        claims = {player_id: self.score_claims(player_claims) for player_id, player_claims in claims.items()}

        names = {player_id: metric_set.player_name for player_id, metric_set in eligible.items()}
        assignment = self.assign(claims, names)

        players = {
            player_id: PlayerTitles(
                player_id=player_id,
                player_name=metric_set.player_name,
                games_played=metric_set.games,
                titles=assignment.claims[player_id],
                primary_title=assignment.primary[player_id],
                percentiles=percentiles[player_id],
                stats=metric_set.stat_values(),
            )
            for player_id, metric_set in eligible.items()
        }
        return TitlesResult(
            players=players,
            eligible_count=len(eligible),
            fallback_count=assignment.fallback_count,
            unique_count=assignment.unique_count,
        )

    # ------------------------------------------------------------------
    # Claim collection
    # ------------------------------------------------------------------

    def collect_claims(
        self, metric_set: MetricSet, percentiles: Mapping[str, PercentileResult]
    ) -> list[TitleClaim]:
        """Every title the player matches, highest priority first, one per id."""
        claims = [
            *self._basic_claims(percentiles),
            *self._camp_balance_claims(metric_set),
            *self._combination_claims(metric_set, percentiles),
            *self._camp_assignment_claims(metric_set),
            *self._role_claims(metric_set),
        ]
        claims.sort(key=lambda claim: -claim.priority)

        seen: set[str] = set()
        unique: list[TitleClaim] = []
        for claim in claims:
            if claim.id in seen:
                continue
            seen.add(claim.id)
            unique.append(claim)
        return unique

    def _basic_claims(self, percentiles: Mapping[str, PercentileResult]) -> list[TitleClaim]:
        claims = []
        for stat_key, result in percentiles.items():
            title_key = self.rules.title_key_for(stat_key)
            if not title_key:
                continue
            definitions = self.rules.titles_for(title_key)
            variants, priority = BASIC_TITLE_VARIANTS[result.category]
            text = next((definitions[v] for v in variants if v in definitions), None)
            if text is None:
                continue

            adjusted = result.percentile
            if result.category in LOW_SIDE_CATEGORIES:
                adjusted = 100 - result.percentile

            claims.append(
                TitleClaim(
                    id=f"{title_key}_{result.category.value.lower()}",
                    type=TitleType.BASIC,
                    title=text.title,
                    emoji=text.emoji,
                    description=text.description,
                    priority=priority,
                    stat=stat_key,
                    value=result.value,
                    percentile=result.percentile,
                    category=result.category.value,
                    adjusted_percentile=adjusted,
                )
            )
        return claims

    def _camp_balance_claims(self, metric_set: MetricSet) -> list[TitleClaim]:
        spread = camp_balance_spread(metric_set)
        category = camp_balance_category(spread)
        if category is None:
            return []
        variant = {BALANCED: "balanced", SPECIALIST: "specialist"}[category]
        text = self.rules.titles_for(CAMP_BALANCE_STAT).get(variant)
        if text is None:
            return []
        return [
            TitleClaim(
                id=f"{CAMP_BALANCE_STAT}_{variant}",
                type=TitleType.CAMP_BALANCE,
                title=text.title,
                emoji=text.emoji,
                description=text.description,
                priority=CAMP_BALANCE_PRIORITY,
                stat=CAMP_BALANCE_STAT,
                value=spread,
                category=category,
            )
        ]

    def _combination_claims(
        self, metric_set: MetricSet, percentiles: Mapping[str, PercentileResult]
    ) -> list[TitleClaim]:
        claims = []
        for rule in self.rules.combinations:
            met, results = self.evaluator.evaluate_rule(metric_set, percentiles, rule)
            if not met:
                continue

            adjusted_values = []
            evidence = []
            for condition, result in zip(rule.conditions, results):
                evidence.append(
                    {
                        "stat": condition.stat,
                        "category": condition.category,
                        "actualValue": result.current_value,
                        "actualPercentile": result.current_percentile,
                    }
                )
                if result.current_percentile is None:
                    continue
                if condition.category in LOW_SIDE_CATEGORIES:
                    adjusted_values.append(100 - result.current_percentile)
                else:
                    adjusted_values.append(result.current_percentile)

            adjusted = (
                sum(adjusted_values) / len(adjusted_values) if adjusted_values else NEUTRAL_PERCENTILE
            )
            claims.append(
                TitleClaim(
                    id=rule.id,
                    type=TitleType.COMBINATION,
                    title=rule.title,
                    emoji=rule.emoji,
                    description=rule.description,
                    priority=rule.priority,
                    percentile=adjusted,
                    conditions=tuple(evidence),
                    adjusted_percentile=adjusted,
                )
            )
        return claims

    def _camp_assignment_claims(self, metric_set: MetricSet) -> list[TitleClaim]:
        definitions = self.rules.titles_for("campAssignment")
        shares = {
            Camp.VILLAGEOIS: ("campVillageoisPercent", metric_set.camp_villageois_percent),
            Camp.LOUP: ("campLoupPercent", metric_set.camp_loup_percent),
            Camp.SOLO: ("campSoloPercent", metric_set.camp_solo_percent),
        }
        claims = []
        for camp, (stat_key, share) in shares.items():
            threshold = self.config.camp_assignment_thresholds.get(camp.value)
            text = definitions.get(camp.value)
            if share is None or threshold is None or text is None or share < threshold:
                continue
            claims.append(
                TitleClaim(
                    id=f"campAssignment_{camp.value}",
                    type=TitleType.CAMP_ASSIGNMENT,
                    title=text.title,
                    emoji=text.emoji,
                    description=text.description,
                    priority=CAMP_ASSIGNMENT_PRIORITY,
                    stat=stat_key,
                    value=share,
                )
            )
        return claims

    def _role_claims(self, metric_set: MetricSet) -> list[TitleClaim]:
        if metric_set.games < self.config.min_games_for_role_titles:
            return []
        definitions = self.rules.titles_for("roleAssignment")
        claims = []
        for role, count in metric_set.role_counts.items():
            key = self.rules.role_title_keys.get(role)
            text = definitions.get(key) if key else None
            if text is None:
                continue
            percentage = count / metric_set.games * 100
            if percentage < self.config.role_min_percentage or count < self.config.role_min_count:
                continue
            claims.append(
                TitleClaim(
                    id=f"role_{key}",
                    type=TitleType.ROLE,
                    title=text.title,
                    emoji=text.emoji,
                    description=text.description,
                    priority=ROLE_TITLE_PRIORITY,
                    role_count=count,
                    role_percentage=percentage,
                )
            )
        return claims

    # ------------------------------------------------------------------
    # Narrowing and scoring
    # ------------------------------------------------------------------

    def narrow_combinations(
        self, claims: Mapping[str, list[TitleClaim]]
    ) -> dict[str, list[TitleClaim]]:
        """Keep each combination title only for the claimants closest to the best fit."""
        best: dict[str, float] = {}
        for player_claims in claims.values():
            for claim in player_claims:
                if claim.type == TitleType.COMBINATION:
                    best[claim.id] = max(best.get(claim.id, claim.adjusted_percentile), claim.adjusted_percentile)

        tolerance = self.config.narrowing_tolerance
        narrowed = {}
        removed = 0
        for player_id, player_claims in claims.items():
            kept = []
            for claim in player_claims:
                if claim.type == TitleType.COMBINATION and claim.adjusted_percentile < best[claim.id] - tolerance:
                    removed += 1
                    continue
                kept.append(claim)
            narrowed[player_id] = kept
        if removed:
            logger.debug(f"Combination narrowing removed {removed} weaker claims")
        return narrowed

    @staticmethod
    def score_claims(claims: list[TitleClaim]) -> list[TitleClaim]:
        """Attach claim strength: priority first, then adjusted percentile, then list position."""
        return [
            replace(claim, claim_strength=claim.priority * 1000 + claim.adjusted_percentile * 10 - index)
            for index, claim in enumerate(claims)
        ]

    # ------------------------------------------------------------------
    # Global assignment
    # ------------------------------------------------------------------

    @staticmethod
    def assign(
        claims: Mapping[str, list[TitleClaim]], names: Mapping[str, str] | None = None
    ) -> AssignmentResult:
        """
        Pure greedy assignment.

        Claims are visited by (strength desc, adjusted percentile desc, input
        order); an id goes to the first player without a primary title. Players
        left without one fall back to their own strongest claim, which may
        repeat an id already owned by someone else.
        """
        names = names or {}
        flat = [
            (player_id, claim)
            for player_id, player_claims in claims.items()
            for claim in player_claims
        ]
        order = sorted(
            range(len(flat)),
            key=lambda i: (-flat[i][1].claim_strength, -flat[i][1].adjusted_percentile, i),
        )

        primary: dict[str, TitleClaim | None] = {player_id: None for player_id in claims}
        owners: dict[str, str] = {}
        for i in order:
            player_id, claim = flat[i]
            if primary[player_id] is not None or claim.id in owners:
                continue
            primary[player_id] = claim
            owners[claim.id] = player_id

        fallback_count = 0
        for player_id, player_claims in claims.items():
            if primary[player_id] is None and player_claims:
                primary[player_id] = max(
                    player_claims, key=lambda c: (c.claim_strength, c.adjusted_percentile)
                )
                fallback_count += 1

        annotated: dict[str, list[TitleClaim]] = {}
        for player_id, player_claims in claims.items():
            annotated[player_id] = [
                replace(claim, primary_owner=names.get(owners[claim.id], owners[claim.id]))
                if claim.id in owners and owners[claim.id] != player_id
                else claim
                for claim in player_claims
            ]
            chosen = primary[player_id]
            if chosen is not None:
                primary[player_id] = next(c for c in annotated[player_id] if c.id == chosen.id)

        total = len(claims)
        if total:
            ratio = len(owners) / total * 100
            logger.info(f"Primary title uniqueness: {len(owners)}/{total} unique ({ratio:.0f}%)")
        if fallback_count:
            logger.warning(f"{fallback_count} players received a non-unique fallback primary title")

        return AssignmentResult(
            claims=annotated,
            primary=primary,
            owners=owners,
            fallback_count=fallback_count,
        )
