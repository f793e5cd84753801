"""
lycanstats Data Contracts

Immutable records for the game log: one GameRecord per completed game, one
ParticipantEntry per player in that game. Raw JSON uses the exported field
names (PascalCase); everything past this module uses these dataclasses.

Producers: core/gamelog.py
Consumers: analysis/metrics.py, analysis/achievements.py, infra/cache.py
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from typing import Any

from lycanstats.core.constants import (
    ALIVE_DEATH_TYPES,
    ELITE_VILLAGER_ROLE,
    HUNTER_ROLE,
    SKIP_VOTE_TARGET,
    Camp,
    camp_for_role,
    normalize_role,
)
from lycanstats.core.utils import (
    fingerprint_record,
    format_order_timestamp,
    parse_timestamp,
    to_float,
)

# ============================================================
# PARTICIPANT-LEVEL RECORDS
# ============================================================


@dataclass(frozen=True)
class Vote:
    """One vote cast during a meeting."""

    day: int
    target: str | None
    date: datetime | None = None

    @property
    def is_skip(self) -> bool:
        return self.target == SKIP_VOTE_TARGET

    @property
    def is_real(self) -> bool:
        """A vote naming a player (not a skip, not blank)."""
        return bool(self.target) and not self.is_skip

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Vote:
        try:
            day = int(data.get("Day") or 0)
        except (TypeError, ValueError):
            day = 0
        return cls(
            day=day,
            target=data.get("Target") or None,
            date=parse_timestamp(data.get("Date")),
        )


@dataclass(frozen=True)
class RoleChange:
    """A main-role change happening during a game."""

    new_role: str
    date: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoleChange:
        return cls(
            new_role=data.get("NewMainRole") or "",
            date=parse_timestamp(data.get("RoleChangeDateIrl")),
        )


@dataclass(frozen=True)
class ParticipantEntry:
    """One player's outcome in one game. Read-only input."""

    player_id: str
    username: str
    color: str | None = None
    main_role_initial: str | None = None
    role_changes: tuple[RoleChange, ...] = ()
    power: str | None = None
    secondary_role: str | None = None
    death_date: datetime | None = None
    death_timing: str | None = None
    death_type: str | None = None
    killer_name: str | None = None
    victorious: bool = False
    votes: tuple[Vote, ...] = ()
    seconds_talked_outside: float | None = None
    seconds_talked_during: float | None = None
    collected_loot: float | None = None

    @property
    def final_role(self) -> str | None:
        """Role held at the end of the game (last role change wins)."""
        for change in reversed(self.role_changes):
            if change.new_role:
                return change.new_role
        return self.main_role_initial

    @property
    def main_camp(self) -> Camp:
        return camp_for_role(self.main_role_initial)

    @property
    def final_camp(self) -> Camp:
        return camp_for_role(self.final_role)

    @property
    def effective_role(self) -> str | None:
        """Power when the role grants one, otherwise the (normalised) initial role."""
        return self.power or normalize_role(self.main_role_initial)

    @property
    def died(self) -> bool:
        return self.death_type is not None and self.death_type not in ALIVE_DEATH_TYPES

    @property
    def is_hunter(self) -> bool:
        return (
            self.main_role_initial == HUNTER_ROLE
            or self.final_role == HUNTER_ROLE
            or (self.main_role_initial == ELITE_VILLAGER_ROLE and self.power == HUNTER_ROLE)
        )

    @property
    def is_lover(self) -> bool:
        return self.main_role_initial in ("Amoureux", "Amoureux Loup") or self.secondary_role == "Amoureux"

    @property
    def seconds_talked(self) -> float:
        return (self.seconds_talked_outside or 0.0) + (self.seconds_talked_during or 0.0)

    def votes_on(self, day: int) -> list[Vote]:
        return [vote for vote in self.votes if vote.day == day]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParticipantEntry:
        """
        Build an entry from a raw PlayerStats item.

        Raises:
            ValueError: when the entry has neither ID nor Username
        """
        username = str(data.get("Username") or "")
        player_id = data.get("ID") or username
        if not player_id:
            raise ValueError("participant has neither ID nor Username")

        return cls(
            player_id=str(player_id),
            username=username,
            color=data.get("Color") or None,
            main_role_initial=data.get("MainRoleInitial") or None,
            role_changes=tuple(
                RoleChange.from_dict(change)
                for change in data.get("MainRoleChanges") or []
                if isinstance(change, dict)
            ),
            power=data.get("Power") or None,
            secondary_role=data.get("SecondaryRole") or None,
            death_date=parse_timestamp(data.get("DeathDateIrl")),
            death_timing=(data.get("DeathTiming") or None),
            death_type=data.get("DeathType"),
            killer_name=data.get("KillerName") or None,
            victorious=bool(data.get("Victorious")),
            votes=tuple(
                Vote.from_dict(vote) for vote in data.get("Votes") or [] if isinstance(vote, dict)
            ),
            seconds_talked_outside=to_float(data.get("SecondsTalkedOutsideMeeting")),
            seconds_talked_during=to_float(data.get("SecondsTalkedDuringMeeting")),
            collected_loot=to_float(data.get("TotalCollectedLoot")),
        )


# ============================================================
# GAME-LEVEL RECORD
# ============================================================


@dataclass(frozen=True)
class GameRecord:
    """One completed game. Immutable once ingested."""

    id: str
    start_date: datetime | None
    end_date: datetime | None
    modded: bool
    players: tuple[ParticipantEntry, ...]
    displayed_id: str | None = None
    map_name: str | None = None
    harvest_goal: float | None = None
    harvest_done: float | None = None
    death_info_complete: bool = True
    version: str | None = None
    fingerprint: str = ""

    @property
    def order_key(self) -> str:
        """Chronological sort key; ties on start date fall back to the game id."""
        return f"{format_order_timestamp(self.start_date)}|{self.id}"

    @cached_property
    def players_by_username(self) -> dict[str, ParticipantEntry]:
        lookup: dict[str, ParticipantEntry] = {}
        for entry in self.players:
            lookup.setdefault(entry.username, entry)
        return lookup

    def find_player(self, username: str | None) -> ParticipantEntry | None:
        if not username:
            return None
        return self.players_by_username.get(username)

    def play_seconds(self, entry: ParticipantEntry) -> float | None:
        """Seconds the participant spent in the game (until death or game end)."""
        end = entry.death_date or self.end_date
        if self.start_date is None or end is None:
            return None
        return (end - self.start_date).total_seconds()

    @property
    def has_talk_data(self) -> bool:
        return any(entry.seconds_talked > 0 for entry in self.players)

    @property
    def has_loot_data(self) -> bool:
        return self.harvest_done is not None or any(
            entry.collected_loot is not None for entry in self.players
        )

    @property
    def max_meeting(self) -> int:
        return max((vote.day for entry in self.players for vote in entry.votes), default=0)

    @property
    def is_complete_modded(self) -> bool:
        return self.modded and self.end_date is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameRecord:
        """
        Build a game from a raw GameStats item.

        Malformed participants are dropped individually; a missing Id raises.

        Raises:
            ValueError: when the game has no Id
        """
        game_id = data.get("Id")
        if game_id in (None, ""):
            raise ValueError("game has no Id")

        players = []
        for raw in data.get("PlayerStats") or []:
            if not isinstance(raw, dict):
                continue
            try:
                players.append(ParticipantEntry.from_dict(raw))
            except ValueError:
                continue

        legacy = data.get("LegacyData")
        death_info_complete = True
        if isinstance(legacy, dict):
            death_info_complete = legacy.get("deathInformationFilled") is True

        return cls(
            id=str(game_id),
            start_date=parse_timestamp(data.get("StartDate")),
            end_date=parse_timestamp(data.get("EndDate")),
            modded=data.get("Modded") is True,
            players=tuple(players),
            displayed_id=(str(data["DisplayedId"]) if data.get("DisplayedId") is not None else None),
            map_name=data.get("MapName") or None,
            harvest_goal=to_float(data.get("HarvestGoal")),
            harvest_done=to_float(data.get("HarvestDone")),
            death_info_complete=death_info_complete,
            version=data.get("Version"),
            fingerprint=fingerprint_record(data),
        )
