"""
Game log loading.

Reads the exported game log (``{"GameStats": [...]}`` or a bare list of games)
into GameRecord objects and defines the dataset slices the pipeline works on.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from lycanstats.core.errors import GameLogError
from lycanstats.core.schemas import GameRecord

logger = logging.getLogger(__name__)

SLICE_ALL = "all"
SLICE_MODDED = "modded"
SLICES = (SLICE_ALL, SLICE_MODDED)


def parse_games(raw_games: Iterable[Any]) -> list[GameRecord]:
    """
    Convert raw game dicts into records.

    Games without an Id or without any usable participant are skipped with a
    warning; they never count as empty games.
    """
    games: list[GameRecord] = []
    seen: set[str] = set()
    skipped = 0

    for index, raw in enumerate(raw_games):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping game #{index}: not an object")
            skipped += 1
            continue
        try:
            game = GameRecord.from_dict(raw)
        except ValueError as e:
            logger.warning(f"Skipping game #{index}: {e}")
            skipped += 1
            continue
        if not game.players:
            logger.warning(f"Skipping game {game.id}: no participant roster")
            skipped += 1
            continue
        if game.id in seen:
            logger.warning(f"Skipping duplicate game id {game.id}")
            skipped += 1
            continue
        seen.add(game.id)
        games.append(game)

    if skipped:
        logger.info(f"Parsed {len(games)} games ({skipped} skipped)")
    else:
        logger.debug(f"Parsed {len(games)} games")
    return games


def load_game_log(path: Path) -> list[GameRecord]:
    """
    Load the game log from disk.

    Raises:
        GameLogError: if the file is missing, unreadable, not JSON, or does not
            contain a list of games. The run must abort without writing output.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise GameLogError(f"Game log not found: {path}") from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise GameLogError(f"Failed to read game log {path}: {e}") from e

    if isinstance(data, dict):
        raw_games = data.get("GameStats")
    else:
        raw_games = data

    if not isinstance(raw_games, list):
        raise GameLogError(f"Game log {path} has no GameStats list")

    logger.info(f"Loaded {len(raw_games)} raw games from {path}")
    return parse_games(raw_games)


def select_slice(games: list[GameRecord], slice_name: str) -> list[GameRecord]:
    """
    Restrict games to a dataset slice.

    ``all`` keeps everything; ``modded`` keeps modded games that have an end date.
    """
    if slice_name == SLICE_ALL:
        return list(games)
    if slice_name == SLICE_MODDED:
        return [game for game in games if game.is_complete_modded]
    raise ValueError(f"Unknown dataset slice: {slice_name}")


def chronological(games: Iterable[GameRecord]) -> list[GameRecord]:
    """Games sorted by (start date, id)."""
    return sorted(games, key=lambda game: game.order_key)
