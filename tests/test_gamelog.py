"""Tests for game log loading and the record types."""

from __future__ import annotations

import json
from datetime import timezone

import pytest
from conftest import game_at, make_game, make_player, records

from lycanstats.core.constants import Camp
from lycanstats.core.errors import GameLogError
from lycanstats.core.gamelog import chronological, load_game_log, parse_games, select_slice
from lycanstats.core.schemas import ParticipantEntry, Vote
from lycanstats.core.utils import parse_timestamp, safe_rate, to_float


class TestLoadGameLog:
    """File-level failures are fatal, game-level ones are skipped."""

    def test_wrapped_and_bare_lists(self, tmp_path, write_log):
        raw = [make_game("g0", [make_player("alice")])]
        assert len(load_game_log(write_log(raw))) == 1

        bare = tmp_path / "bare.json"
        bare.write_text(json.dumps(raw), encoding="utf-8")
        assert len(load_game_log(bare)) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(GameLogError, match="not found"):
            load_game_log(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(GameLogError):
            load_game_log(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(json.dumps({"GameStats": [{"MapName": "Château"}]}, ensure_ascii=False).encode("latin-1"))
        with pytest.raises(GameLogError, match="Failed to read"):
            load_game_log(path)

    def test_skips_bad_games(self):
        raw = [
            make_game("g0", [make_player("alice")]),
            "not a game",
            {"PlayerStats": [make_player("bob")]},
            make_game("empty", []),
            make_game("g0", [make_player("carol")]),
        ]
        games = parse_games(raw)
        assert [g.id for g in games] == ["g0"]
        assert games[0].players[0].username == "alice"

    def test_participant_without_identity_is_dropped(self):
        raw = [make_game("g0", [make_player("alice"), {"Victorious": True}])]
        assert len(parse_games(raw)[0].players) == 1


class TestSlices:
    def test_modded_requires_end_date(self):
        games = records(
            [
                make_game("a", [make_player("x")]),
                make_game("b", [make_player("x")], modded=False),
                make_game("c", [make_player("x")], ended=False),
            ]
        )
        assert [g.id for g in select_slice(games, "all")] == ["a", "b", "c"]
        assert [g.id for g in select_slice(games, "modded")] == ["a"]
        with pytest.raises(ValueError):
            select_slice(games, "ranked")

    def test_chronological_ties_on_id(self):
        games = records(
            [
                make_game("b", [make_player("x")], start=game_at(0)),
                make_game("a", [make_player("x")], start=game_at(0)),
                make_game("z", [make_player("x")], start=game_at(-1)),
            ]
        )
        assert [g.id for g in chronological(games)] == ["z", "a", "b"]


class TestRecords:
    def test_fingerprint_follows_content(self):
        a = records([make_game("g0", [make_player("alice")])])[0]
        b = records([make_game("g0", [make_player("alice")])])[0]
        c = records([make_game("g0", [make_player("alice", victorious=True)])])[0]
        assert a.fingerprint == b.fingerprint
        assert a.fingerprint != c.fingerprint

    def test_death_info_flag(self):
        game = records([make_game("g0", [make_player("alice")], death_info=False)])[0]
        assert not game.death_info_complete

    def test_alive_markers(self):
        assert not ParticipantEntry(player_id="a", username="a", death_type="N/A").died
        assert not ParticipantEntry(player_id="a", username="a", death_type="SURVIVOR").died
        assert ParticipantEntry(player_id="a", username="a", death_type="VOTED").died

    def test_camps(self):
        assert ParticipantEntry(player_id="a", username="a", main_role_initial="Louveteau").main_camp == Camp.LOUP
        assert ParticipantEntry(player_id="a", username="a", main_role_initial="Amoureux Loup").main_camp == Camp.SOLO
        assert ParticipantEntry(player_id="a", username="a").main_camp == Camp.VILLAGEOIS

    def test_votes(self):
        assert Vote(day=1, target="Passé").is_skip
        assert not Vote(day=1, target=None).is_real
        assert Vote(day=1, target="bob").is_real

    def test_play_seconds_until_death(self):
        start = game_at(0)
        game = records(
            [
                make_game(
                    "g0",
                    [make_player("alice"), make_player("bob", death_date=start.replace(minute=10))],
                    start=start,
                    minutes=30,
                )
            ]
        )[0]
        alice, bob = game.players
        assert game.play_seconds(alice) == 1800
        assert game.play_seconds(bob) == 600


class TestCoercion:
    def test_parse_timestamp(self):
        parsed = parse_timestamp("2025-01-01T20:00:00")
        assert parsed.tzinfo == timezone.utc
        assert parse_timestamp("garbage") is None
        assert parse_timestamp(None) is None

    def test_to_float(self):
        assert to_float("12.5") == 12.5
        assert to_float(True) is None
        assert to_float("") is None
        assert to_float(float("nan")) is None

    def test_safe_rate(self):
        assert safe_rate(1, 4) == 25.0
        assert safe_rate(1, 0) is None
        assert safe_rate(1, 4, min_denominator=5) is None
        assert safe_rate(1, 4, scale=1.0) == 0.25
