"""
lycanstats - Constants

Camps, death types, percentile categories and role tables for Lycans game logs.
Role and camp names are kept in French because they are the raw values found
in the exported game logs.
"""

from __future__ import annotations

from enum import StrEnum


class Camp(StrEnum):
    """
    Main camp a participant plays for.

    Solo covers every role that wins on its own terms (Amoureux, Agent,
    Idiot du Village, Vaudou, ...).
    """

    VILLAGEOIS = "villageois"
    LOUP = "loup"
    SOLO = "solo"


class DeathType(StrEnum):
    """Death type codes as written in the game log."""

    SURVIVOR = "SURVIVOR"
    VOTED = "VOTED"
    BY_WOLF = "BY_WOLF"
    BY_WOLF_REZ = "BY_WOLF_REZ"
    BY_WOLF_LOVER = "BY_WOLF_LOVER"
    BY_ZOMBIE = "BY_ZOMBIE"
    BY_BEAST = "BY_BEAST"
    BY_AVATAR_CHAIN = "BY_AVATAR_CHAIN"
    BULLET = "BULLET"
    BULLET_HUMAN = "BULLET_HUMAN"
    BULLET_WOLF = "BULLET_WOLF"
    BULLET_BOUNTYHUNTER = "BULLET_BOUNTYHUNTER"
    SHERIF = "SHERIF"
    OTHER_AGENT = "OTHER_AGENT"
    AVENGER = "AVENGER"
    SEER = "SEER"
    HANTED = "HANTED"
    ASSASSIN = "ASSASSIN"
    LOVER_DEATH = "LOVER_DEATH"
    LOVER_DEATH_OWN = "LOVER_DEATH_OWN"
    BOMB = "BOMB"
    CRUSHED = "CRUSHED"
    STARVATION = "STARVATION"
    STARVATION_AS_BEAST = "STARVATION_AS_BEAST"
    FALL = "FALL"
    UNKNOWN = "UNKNOWN"


class PercentileCategory(StrEnum):
    """Discrete buckets a percentile falls into."""

    EXTREME_LOW = "EXTREME_LOW"
    LOW = "LOW"
    BELOW_AVERAGE = "BELOW_AVERAGE"
    AVERAGE = "AVERAGE"
    ABOVE_AVERAGE = "ABOVE_AVERAGE"
    HIGH = "HIGH"
    EXTREME_HIGH = "EXTREME_HIGH"


# Categories where a lower percentile makes a stronger claim
LOW_SIDE_CATEGORIES = frozenset(
    {
        PercentileCategory.EXTREME_LOW,
        PercentileCategory.LOW,
        PercentileCategory.BELOW_AVERAGE,
    }
)

# Default percentile cut points (tunable through TitlesConfig)
PERCENTILE_THRESHOLDS: dict[str, float] = {
    "EXTREME_HIGH": 85,
    "HIGH": 65,
    "ABOVE_AVERAGE": 55,
    "BELOW_AVERAGE": 45,
    "LOW": 35,
    "EXTREME_LOW": 15,
}

# Eligibility
MIN_GAMES_FOR_TITLES = 25
MIN_GAMES_FOR_ROLE_TITLES = 10

# Vote target meaning "skip"
SKIP_VOTE_TARGET = "Passé"

# Share of the earliest voters in a meeting that count as "early"
EARLY_VOTE_FRACTION = 0.33

# Aggressiveness weights applied to skip and abstention rates
SKIP_PENALTY = 0.5
ABSTENTION_PENALTY = 0.7

# Death types that never credit a kill to KillerName
NON_KILL_DEATH_TYPES = frozenset(
    {
        DeathType.VOTED,
        DeathType.STARVATION,
        DeathType.FALL,
        DeathType.BY_AVATAR_CHAIN,
        DeathType.SURVIVOR,
        DeathType.UNKNOWN,
        "",
    }
)

HUNTER_BULLET_TYPES = frozenset(
    {DeathType.BULLET, DeathType.BULLET_HUMAN, DeathType.BULLET_WOLF}
)

# Values of DeathType that mean the participant is still alive
ALIVE_DEATH_TYPES = frozenset({"", "N/A", DeathType.SURVIVOR})

DAY1_DEATH_TIMINGS = frozenset({"N1", "J1", "M1"})

# Expected win rate of each camp, used to normalise camp performance
EXPECTED_WIN_RATES: dict[Camp, float] = {
    Camp.VILLAGEOIS: 52.0,
    Camp.LOUP: 28.0,
    Camp.SOLO: 20.0,
}

# Camp balance spreads (in win-rate points after normalisation)
CAMP_BALANCED_MAX_SPREAD = 10.0
CAMP_SPECIALIST_MIN_SPREAD = 15.0

# Roles
HUNTER_ROLE = "Chasseur"
ELITE_VILLAGER_ROLE = "Villageois Élite"
AMOUREUX_ROLES = frozenset({"Amoureux", "Amoureux Loup", "Amoureux Villageois"})
VILLAGER_ROLES = frozenset({"Villageois", HUNTER_ROLE, "Alchimiste", ELITE_VILLAGER_ROLE})
WOLF_ROLES = frozenset({"Loup", "Traître", "Louveteau"})

# Roles folded into another role name before camp resolution
ROLE_ALIASES: dict[str, str] = {
    "Amoureux Loup": "Amoureux",
    "Amoureux Villageois": "Amoureux",
    "Zombie": "Vaudou",
}


def camp_for_role(role: str | None) -> Camp:
    """Resolve the main camp of a role name as found in the game log."""
    if not role:
        return Camp.VILLAGEOIS
    role = ROLE_ALIASES.get(role, role)
    if role in VILLAGER_ROLES:
        return Camp.VILLAGEOIS
    if role in WOLF_ROLES:
        return Camp.LOUP
    return Camp.SOLO


def normalize_role(role: str | None) -> str | None:
    """Fold role variants (Amoureux Loup, Zombie, ...) into their base role."""
    if role is None:
        return None
    return ROLE_ALIASES.get(role, role)
