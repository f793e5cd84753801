"""
lycanstats Core - Foundation modules for game-log analysis.

This module contains the fundamental components:
- constants: Camps, death types, percentile categories and role tables
- config: Application configuration management
- errors: Exception hierarchy
- utils: General utility functions
- schemas: Immutable game and participant records
- gamelog: Game log loading and dataset slices
"""

from lycanstats.core.constants import (
    MIN_GAMES_FOR_ROLE_TITLES,
    MIN_GAMES_FOR_TITLES,
    PERCENTILE_THRESHOLDS,
    Camp,
    DeathType,
    PercentileCategory,
    camp_for_role,
)
from lycanstats.core.errors import CacheError, GameLogError, LycanStatsError, RuleTableError
from lycanstats.core.gamelog import SLICE_ALL, SLICE_MODDED, load_game_log, select_slice
from lycanstats.core.schemas import GameRecord, ParticipantEntry, RoleChange, Vote

__all__ = [
    # Enums
    "Camp",
    "DeathType",
    "PercentileCategory",
    # Constants
    "MIN_GAMES_FOR_ROLE_TITLES",
    "MIN_GAMES_FOR_TITLES",
    "PERCENTILE_THRESHOLDS",
    "camp_for_role",
    # Errors
    "CacheError",
    "GameLogError",
    "LycanStatsError",
    "RuleTableError",
    # Game log
    "SLICE_ALL",
    "SLICE_MODDED",
    "load_game_log",
    "select_slice",
    # Schemas (data contracts)
    "GameRecord",
    "ParticipantEntry",
    "RoleChange",
    "Vote",
]
