"""Shared fixtures and game-log builders for lycanstats tests."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from lycanstats.core.config import CacheConfig, DataConfig, LycanStatsConfig, reset_config
from lycanstats.core.gamelog import parse_games
from lycanstats.core.schemas import GameRecord

BASE_TIME = datetime(2025, 1, 1, 20, 0, tzinfo=timezone.utc)


def iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def make_player(
    name: str,
    role: str = "Villageois",
    *,
    victorious: bool = False,
    death_type: str | None = None,
    death_timing: str | None = None,
    killer: str | None = None,
    votes: list[tuple[int, str]] | None = None,
    color: str | None = None,
    power: str | None = None,
    secondary_role: str | None = None,
    talk_outside: float | None = None,
    talk_during: float | None = None,
    loot: float | None = None,
    death_date: datetime | None = None,
    player_id: str | None = None,
) -> dict:
    """Raw PlayerStats entry, using the exported field names."""
    raw = {
        "ID": player_id or f"id-{name}",
        "Username": name,
        "Color": color,
        "MainRoleInitial": role,
        "MainRoleChanges": [],
        "Power": power,
        "SecondaryRole": secondary_role,
        "DeathDateIrl": iso(death_date) if death_date else None,
        "DeathTiming": death_timing,
        "DeathType": death_type,
        "KillerName": killer,
        "Victorious": victorious,
        "Votes": [{"Day": day, "Target": target} for day, target in (votes or [])],
        "SecondsTalkedOutsideMeeting": talk_outside,
        "SecondsTalkedDuringMeeting": talk_during,
        "TotalCollectedLoot": loot,
    }
    return raw


def make_game(
    game_id: str,
    players: list[dict],
    *,
    start: datetime | None = None,
    minutes: float = 30,
    modded: bool = True,
    map_name: str = "Village",
    harvest_done: float | None = None,
    death_info: bool = True,
    ended: bool = True,
) -> dict:
    """Raw GameStats entry."""
    start = start or BASE_TIME
    return {
        "Id": game_id,
        "DisplayedId": game_id,
        "StartDate": iso(start),
        "EndDate": iso(start + timedelta(minutes=minutes)) if ended else None,
        "MapName": map_name,
        "HarvestGoal": None,
        "HarvestDone": harvest_done,
        "Modded": modded,
        "LegacyData": {"deathInformationFilled": death_info},
        "PlayerStats": players,
    }


def game_at(index: int) -> datetime:
    """Start time of the index-th game in a series, one hour apart."""
    return BASE_TIME + timedelta(hours=index)


def records(raw_games: list[dict]) -> list[GameRecord]:
    return parse_games(raw_games)


def win_rate_series(prefix: str, num_players: int, num_games: int) -> list[dict]:
    """
    ``num_games`` two-player games per player pair so that player ``p<i>``
    wins roughly i / num_players of their games. Every game is modded.
    """
    games = []
    index = 0
    for i in range(num_players):
        name = f"p{i:02d}"
        wins = round(num_games * i / num_players)
        for g in range(num_games):
            players = [
                make_player(name, victorious=g < wins),
                make_player(f"{prefix}-filler", role="Loup", victorious=g >= wins),
            ]
            games.append(make_game(f"{prefix}-{index}", players, start=game_at(index)))
            index += 1
    return games


@pytest.fixture(autouse=True)
def _reset_global_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def write_log(tmp_path):
    """Factory writing a game log in the exported ``{"GameStats": [...]}`` form."""

    def _write(raw_games: list[dict], name: str = "gameLog.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"GameStats": raw_games}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def run_config(tmp_path) -> LycanStatsConfig:
    out = tmp_path / "out"
    return LycanStatsConfig(
        data=DataConfig(game_log=str(tmp_path / "gameLog.json"), output_dir=str(out)),
        cache=CacheConfig(enabled=True, path=str(out / "cache.json")),
    )
