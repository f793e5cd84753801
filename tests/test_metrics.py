"""Tests for metric folding and derivation."""

from __future__ import annotations

import pytest
from conftest import game_at, make_game, make_player, records

from lycanstats.analysis.metrics import (
    MetricAggregator,
    MetricSet,
    MetricTotals,
    is_alive_at_meeting,
    metrics_settings_hash,
)
from lycanstats.core.config import MetricsConfig
from lycanstats.core.schemas import ParticipantEntry


def _series(results: list[bool], role: str = "Villageois") -> list[dict]:
    """One game per result for alice (against bob)."""
    return [
        make_game(
            f"g{i}",
            [
                make_player("alice", role=role, victorious=won),
                make_player("bob", role="Loup", victorious=not won),
            ],
            start=game_at(i),
        )
        for i, won in enumerate(results)
    ]


class TestParticipation:
    """Games, wins, camps and series."""

    def test_win_rate_and_series(self):
        games = records(_series([True, True, False, True, True, True]))
        metrics = MetricAggregator().aggregate(games)

        alice = metrics["id-alice"]
        assert alice.games == 6
        assert alice.win_rate == pytest.approx(5 / 6 * 100)
        assert alice.longest_win_series == 3
        assert alice.longest_loss_series == 1
        assert alice.games_played == 6

    def test_camp_win_rate_needs_minimum_games(self):
        games = records(_series([True, False, True, False, True]))
        metrics = MetricAggregator().aggregate(games)

        # 5 villageois games, minimum is 6
        assert metrics["id-alice"].win_rate_villageois is None
        assert metrics["id-alice"].win_rate == pytest.approx(60.0)

        relaxed = MetricAggregator(MetricsConfig(min_camp_games={"villageois": 5, "loup": 5, "solo": 5}))
        assert relaxed.aggregate(games)["id-alice"].win_rate_villageois == pytest.approx(60.0)

    def test_camp_share(self):
        games = records(_series([True, False]))
        metrics = MetricAggregator().aggregate(games)
        assert metrics["id-alice"].camp_villageois_percent == 100.0
        assert metrics["id-bob"].camp_loup_percent == 100.0
        assert metrics["id-bob"].camp_solo_percent == 0.0

    def test_games_are_folded_chronologically(self):
        raw = _series([False, True, True])
        # Reverse the input order; streaks must follow start dates
        games = records(list(reversed(raw)))
        alice = MetricAggregator().aggregate(games)["id-alice"]
        assert alice.longest_win_series == 2
        assert alice.longest_loss_series == 1

    def test_role_counts_use_power(self):
        games = records(
            [
                make_game(
                    "g0",
                    [
                        make_player("alice", role="Villageois Élite", power="Chasseur"),
                        make_player("bob", role="Amoureux Loup"),
                    ],
                )
            ]
        )
        metrics = MetricAggregator().aggregate(games)
        assert metrics["id-alice"].role_counts == {"Chasseur": 1}
        assert metrics["id-bob"].role_counts == {"Amoureux": 1}


class TestTalking:
    """Talking time normalised per 60 minutes of play."""

    def test_talking_per_hour(self):
        games = records(
            [
                make_game(
                    "g0",
                    [
                        make_player("alice", talk_outside=60, talk_during=30),
                        make_player("bob", talk_outside=0, talk_during=0),
                    ],
                    minutes=30,
                )
            ]
        )
        alice = MetricAggregator().aggregate(games)["id-alice"]
        assert alice.talking_per_60min == pytest.approx(180.0)
        assert alice.talking_outside_per_60min == pytest.approx(120.0)
        assert alice.talking_during_per_60min == pytest.approx(60.0)

    def test_games_without_talk_data_are_ignored(self):
        games = records([make_game("g0", [make_player("alice"), make_player("bob")])])
        assert MetricAggregator().aggregate(games)["id-alice"].talking_per_60min is None


class TestDeathsAndKills:
    """Survival and kill rates only use games with complete death information."""

    def test_kill_credited_to_killer(self):
        games = records(
            [
                make_game(
                    "g0",
                    [
                        make_player("alice", role="Loup", victorious=True),
                        make_player("bob", death_type="BY_WOLF", death_timing="N1", killer="alice"),
                        make_player("carol", death_type="VOTED", death_timing="M1", killer="alice"),
                    ],
                )
            ]
        )
        metrics = MetricAggregator().aggregate(games)
        assert metrics["id-alice"].kill_rate == 1.0
        assert metrics["id-alice"].survival_rate == 100.0
        assert metrics["id-bob"].survival_rate == 0.0
        assert metrics["id-bob"].survival_day1_rate == 0.0
        assert metrics["id-carol"].survival_day1_rate == 0.0

    def test_incomplete_death_info_is_skipped(self):
        games = records(
            [
                make_game(
                    "g0",
                    [make_player("alice"), make_player("bob", death_type="BY_WOLF", killer="alice")],
                    death_info=False,
                )
            ]
        )
        metrics = MetricAggregator().aggregate(games)
        assert metrics["id-alice"].kill_rate is None
        assert metrics["id-bob"].survival_rate is None


class TestVoting:
    """Meeting participation, skips, abstentions and accuracy."""

    def _game(self):
        return records(
            [
                make_game(
                    "g0",
                    [
                        make_player("alice", votes=[(1, "bob"), (2, "Passé")]),
                        make_player("bob", role="Loup", votes=[(1, "alice")]),
                        make_player("carol"),
                        make_player("dave", death_type="BY_WOLF", death_timing="N1", killer="bob"),
                    ],
                )
            ]
        )

    def test_aggressiveness(self):
        metrics = MetricAggregator().aggregate(self._game())
        # 2 meetings: one vote, one skip
        assert metrics["id-alice"].voting_aggressiveness == pytest.approx(50 - 0.5 * 50)
        # 2 meetings, never voted
        assert metrics["id-carol"].voting_aggressiveness == pytest.approx(-70.0)
        # dead before the first meeting
        assert metrics["id-dave"].voting_aggressiveness is None

    def test_accuracy_counts_enemy_targets(self):
        aggregator = MetricAggregator(MetricsConfig(min_votes_for_accuracy=1))
        metrics = aggregator.aggregate(self._game())
        assert metrics["id-alice"].voting_accuracy == 100.0
        assert metrics["id-bob"].voting_accuracy == 100.0

    def test_accuracy_needs_minimum_votes(self):
        metrics = MetricAggregator().aggregate(self._game())
        assert metrics["id-alice"].voting_accuracy is None

    def test_alive_at_meeting(self):
        entry = ParticipantEntry(player_id="x", username="x", death_timing="M2")
        assert is_alive_at_meeting(entry, 2)
        assert not is_alive_at_meeting(entry, 3)
        night = ParticipantEntry(player_id="y", username="y", death_timing="N2")
        assert is_alive_at_meeting(night, 1)
        assert not is_alive_at_meeting(night, 2)


class TestLoot:
    """Loot per 60 minutes, from collected loot or the shared harvest."""

    def test_collected_loot(self):
        games = records(
            [make_game("g0", [make_player("alice", loot=30), make_player("bob", loot=0)], minutes=30)]
        )
        assert MetricAggregator().aggregate(games)["id-alice"].loot_per_60min == pytest.approx(60.0)

    def test_harvest_share_by_time_alive(self):
        start = game_at(0)
        games = records(
            [
                make_game(
                    "g0",
                    [
                        make_player("alice"),
                        make_player(
                            "bob",
                            death_type="BY_WOLF",
                            death_timing="N1",
                            death_date=start.replace(minute=10),
                        ),
                    ],
                    start=start,
                    minutes=30,
                    harvest_done=40,
                )
            ]
        )
        metrics = MetricAggregator().aggregate(games)
        # alice alive 30 min, bob 10 min: 30 + 10 of the 40 harvest
        assert metrics["id-alice"].loot_per_60min == pytest.approx(60.0)
        assert metrics["id-bob"].loot_per_60min == pytest.approx(60.0)


class TestIncrementalFolding:
    """Folding in batches equals folding everything at once."""

    def test_batches_equal_full_recompute(self):
        games = records(_series([True, False, False, True, True, False, True, True]))
        aggregator = MetricAggregator()

        first = aggregator.fold({}, games[:3])
        second = aggregator.fold(first, games[3:])
        assert aggregator.derive_all(second) == aggregator.aggregate(games)

    def test_fold_does_not_mutate_input(self):
        games = records(_series([True, False]))
        aggregator = MetricAggregator()
        first = aggregator.fold({}, games[:1])
        before = first["id-alice"].to_dict()
        aggregator.fold(first, games[1:])
        assert first["id-alice"].to_dict() == before

    def test_totals_round_trip(self):
        games = records(_series([True, False, True]))
        totals = MetricAggregator().fold({}, games)["id-alice"]
        assert MetricTotals.from_dict(totals.to_dict()) == totals


class TestMetricSet:
    """Registry keys and serialization."""

    def test_stat_keys_map_to_fields(self):
        fields = MetricSet.stat_fields()
        assert fields["talkingPer60Min"] == "talking_per_60min"
        assert fields["winRate"] == "win_rate"

    def test_stat_fields_built_once(self):
        assert MetricSet.stat_fields() is MetricSet.stat_fields()
        with pytest.raises(TypeError):
            MetricSet.stat_fields()["winRate"] = "other"

    def test_from_dict_rejects_non_numeric_stat(self):
        data = MetricSet(player_id="x", win_rate=50.0).to_dict()
        data["stats"]["winRate"] = "50"
        with pytest.raises(TypeError):
            MetricSet.from_dict(data)

    def test_null_stays_null(self):
        metric_set = MetricSet(player_id="x")
        restored = MetricSet.from_dict(metric_set.to_dict())
        assert restored.win_rate is None
        assert restored == metric_set

    def test_settings_hash_changes_with_config(self):
        assert metrics_settings_hash(MetricsConfig()) == metrics_settings_hash(MetricsConfig())
        assert metrics_settings_hash(MetricsConfig()) != metrics_settings_hash(
            MetricsConfig(min_votes_for_accuracy=3)
        )
