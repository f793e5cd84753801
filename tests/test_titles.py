"""Tests for title claims, combination narrowing and unique assignment."""

from __future__ import annotations

import pytest

from lycanstats.analysis.metrics import MetricSet
from lycanstats.analysis.titles import TitleAssigner, TitleClaim, TitleType
from lycanstats.core.config import TitlesConfig
from lycanstats.rules.table import default_rule_table


def _population(values: list[float], games: int = 30) -> dict[str, MetricSet]:
    """Players whose only known stat is their win rate."""
    return {
        f"p{i:02d}": MetricSet(player_id=f"p{i:02d}", player_name=f"Player{i:02d}", games=games, win_rate=v)
        for i, v in enumerate(values)
    }


def _claim(claim_id: str, strength: float, adjusted: float = 50.0, type_: str = TitleType.BASIC) -> TitleClaim:
    return TitleClaim(
        id=claim_id,
        type=type_,
        title=claim_id,
        priority=6,
        adjusted_percentile=adjusted,
        claim_strength=strength,
    )


class TestEligibility:
    """Only players with enough games get titles."""

    def test_below_minimum_is_excluded(self):
        metric_sets = _population([float(v) for v in range(0, 100, 10)])
        metric_sets["rookie"] = MetricSet(player_id="rookie", games=24, win_rate=100.0)

        result = TitleAssigner(default_rule_table()).generate(metric_sets)
        assert "rookie" not in result.players
        assert result.eligible_count == 10

    def test_ineligible_players_do_not_shape_distributions(self):
        base = _population([float(v) for v in range(0, 100, 10)])
        with_rookies = dict(base)
        for i in range(5):
            with_rookies[f"r{i}"] = MetricSet(player_id=f"r{i}", games=3, win_rate=100.0)

        assigner = TitleAssigner(default_rule_table())
        a = assigner.generate(base).players["p09"].percentiles["winRate"]
        b = assigner.generate(with_rookies).players["p09"].percentiles["winRate"]
        assert a == b


class TestPrimaryTitle:
    """Top win-rate players receive the win-rate title."""

    def test_ninetieth_percentile_gets_extreme_title(self):
        result = TitleAssigner(default_rule_table()).generate(
            _population([float(v) for v in range(0, 100, 10)])
        )
        top = result.players["p09"]
        assert top.percentiles["winRate"].percentile == pytest.approx(90.0)
        assert top.primary_title.id == "winRate_extreme_high"
        assert top.primary_title.title == "L'Inarrêtable"
        assert top.primary_title.primary_owner is None
        # win rate alone never satisfies a combination
        assert not [c for c in top.titles if c.type == TitleType.COMBINATION]

    def test_ninetieth_percentile_gets_high_title(self):
        config = TitlesConfig(percentile_thresholds={"EXTREME_HIGH": 95})
        result = TitleAssigner(default_rule_table(), config).generate(
            _population([float(v) for v in range(0, 100, 10)])
        )
        top = result.players["p09"]
        assert top.primary_title.id == "winRate_high"
        assert top.primary_title.title == "Le·a Winner"

    def test_primary_titles_unique_except_fallback(self):
        result = TitleAssigner(default_rule_table()).generate(
            _population([float(v) for v in range(0, 100, 10)])
        )
        primary_ids = [p.primary_title.id for p in result.players.values() if p.primary_title]
        duplicates = len(primary_ids) - len(set(primary_ids))
        assert duplicates == result.fallback_count
        assert result.fallback_count > 0

    def test_claims_name_the_owner(self):
        result = TitleAssigner(default_rule_table()).generate(
            _population([float(v) for v in range(0, 100, 10)])
        )
        # p07 and p08 both sit in HIGH; p08 is stronger
        assert result.players["p08"].primary_title.id == "winRate_high"
        p07_claim = next(c for c in result.players["p07"].titles if c.id == "winRate_high")
        assert p07_claim.primary_owner == "Player08"

    def test_idempotent(self):
        metric_sets = _population([float(v) for v in range(0, 100, 10)])
        assigner = TitleAssigner(default_rule_table())
        first = {pid: p.to_dict() for pid, p in assigner.generate(metric_sets).players.items()}
        second = {pid: p.to_dict() for pid, p in assigner.generate(metric_sets).players.items()}
        assert first == second


class TestAssign:
    """Greedy pass over claims sorted by strength."""

    def test_strongest_claim_wins(self):
        claims = {
            "a": [_claim("x", 6500), _claim("y", 4000)],
            "b": [_claim("x", 6800)],
        }
        result = TitleAssigner.assign(claims, {"a": "Alice", "b": "Bob"})
        assert result.primary["b"].id == "x"
        assert result.primary["a"].id == "y"
        assert result.fallback_count == 0
        assert result.claims["a"][0].primary_owner == "Bob"

    def test_tie_breaks_on_percentile_then_order(self):
        claims = {
            "a": [_claim("x", 6000, adjusted=70)],
            "b": [_claim("x", 6000, adjusted=80)],
        }
        assert TitleAssigner.assign(claims).primary["b"].id == "x"

        claims = {"a": [_claim("x", 6000)], "b": [_claim("x", 6000)]}
        result = TitleAssigner.assign(claims)
        assert result.owners["x"] == "a"

    def test_fallback_is_counted(self):
        claims = {"a": [_claim("x", 6000)], "b": [_claim("x", 5000)], "c": []}
        result = TitleAssigner.assign(claims)
        assert result.primary["b"].id == "x"
        assert result.primary["c"] is None
        assert result.fallback_count == 1
        assert result.unique_count == 1

    def test_fallback_takes_strongest_own_claim(self):
        scored = TitleAssigner.score_claims(
            [
                TitleClaim(id="x", type=TitleType.BASIC, title="x", priority=6, adjusted_percentile=70.0),
                TitleClaim(id="y", type=TitleType.BASIC, title="y", priority=6, adjusted_percentile=99.0),
            ]
        )
        claims = {
            "owner-x": [_claim("x", 9000)],
            "owner-y": [_claim("y", 9000)],
            "p": scored,
        }
        result = TitleAssigner.assign(claims)
        assert result.owners == {"x": "owner-x", "y": "owner-y"}
        assert result.primary["p"].id == "y"
        assert result.primary["p"].primary_owner == "owner-y"
        assert result.fallback_count == 1


class TestNarrowing:
    """Combination titles stay with the best-fitting claimants."""

    def test_keeps_ties_within_tolerance(self):
        assigner = TitleAssigner(default_rule_table(), TitlesConfig(narrowing_tolerance=0.1))
        claims = {
            "a": [_claim("combo", 0, adjusted=90.0, type_=TitleType.COMBINATION)],
            "b": [_claim("combo", 0, adjusted=90.0, type_=TitleType.COMBINATION)],
            "c": [_claim("combo", 0, adjusted=89.95, type_=TitleType.COMBINATION)],
            "d": [_claim("combo", 0, adjusted=80.0, type_=TitleType.COMBINATION)],
        }
        narrowed = assigner.narrow_combinations(claims)
        assert [c.id for c in narrowed["a"]] == ["combo"]
        assert [c.id for c in narrowed["b"]] == ["combo"]
        assert [c.id for c in narrowed["c"]] == ["combo"]
        assert narrowed["d"] == []

    def test_basic_claims_untouched(self):
        assigner = TitleAssigner(default_rule_table())
        claims = {
            "a": [_claim("winRate_high", 0, adjusted=90.0)],
            "b": [_claim("winRate_high", 0, adjusted=70.0)],
        }
        assert assigner.narrow_combinations(claims) == claims


class TestClaims:
    """Claim collection from metric sets."""

    def test_camp_assignment_and_role_claims(self):
        metric_set = MetricSet(
            player_id="p",
            games=30,
            role_counts={"Chasseur": 8},
            camp_villageois_percent=80.0,
            camp_loup_percent=20.0,
            camp_solo_percent=0.0,
        )
        claims = TitleAssigner(default_rule_table()).collect_claims(metric_set, {})
        ids = {claim.id for claim in claims}
        assert "campAssignment_villageois" in ids
        assert "campAssignment_loup" not in ids
        assert "role_chasseur" in ids

    def test_claims_sorted_by_priority(self):
        metric_set = MetricSet(
            player_id="p",
            games=30,
            camp_villageois_percent=80.0,
            win_rate_villageois=56.0,
            win_rate_loup=32.0,
        )
        claims = TitleAssigner(default_rule_table()).collect_claims(metric_set, {})
        priorities = [claim.priority for claim in claims]
        assert priorities == sorted(priorities, reverse=True)
        assert claims[0].type == TitleType.CAMP_BALANCE
