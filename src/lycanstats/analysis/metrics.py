"""
Per-player metric aggregation.

Games are folded, in chronological order, into additive raw totals
(MetricTotals). Rates are only ever derived from those totals
(MetricSet), never accumulated, so folding games one batch at a time gives
exactly the same numbers as folding them all at once.

Usage:
    aggregator = MetricAggregator(config.metrics)
    metric_sets = aggregator.aggregate(games)

    # incremental
    totals = aggregator.fold(previous_totals, new_games)
    metric_sets = aggregator.derive_all(totals)
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, fields
from types import MappingProxyType
from typing import Any

from lycanstats.core.config import MetricsConfig
from lycanstats.core.constants import (
    ABSTENTION_PENALTY,
    DAY1_DEATH_TIMINGS,
    HUNTER_BULLET_TYPES,
    NON_KILL_DEATH_TYPES,
    SKIP_PENALTY,
    Camp,
)
from lycanstats.core.schemas import GameRecord, ParticipantEntry
from lycanstats.core.utils import compute_content_hash, safe_rate, stored_number

logger = logging.getLogger(__name__)

CAMPS = tuple(camp.value for camp in Camp)


def _camp_counter() -> dict[str, float]:
    return {camp: 0 for camp in CAMPS}


def _checked_counter(name: str, value: Any, integral: bool) -> dict[str, int | float]:
    if not isinstance(value, dict):
        raise TypeError(f"{name} must be an object, got {value!r}")
    return {str(key): stored_number(count, f"{name}.{key}", integral) for key, count in value.items()}


def _checked_total(name: str, kind: str, value: Any) -> Any:
    # kind is the field annotation as written ("int", "dict[str, float]", ...)
    if kind == "str":
        if not isinstance(value, str):
            raise TypeError(f"{name} must be a string, got {value!r}")
        return value
    if kind.startswith("dict"):
        return _checked_counter(name, value, integral=kind.endswith("int]"))
    return stored_number(value, name, integral=kind == "int")


# ============================================================================
# Raw totals
# ============================================================================


@dataclass
class MetricTotals:
    """
    Additive numerators and denominators for one player.

    Every field is a count or a sum; the only non-additive state is the
    chronological win/loss streak, which is carried along with the totals.
    """

    player_id: str
    player_name: str = ""

    # Participation
    games: int = 0
    wins: int = 0
    camp_games: dict[str, int] = field(default_factory=_camp_counter)
    camp_wins: dict[str, int] = field(default_factory=_camp_counter)
    role_counts: dict[str, int] = field(default_factory=dict)

    # Talking (seconds)
    talk_outside: float = 0.0
    talk_during: float = 0.0
    talk_duration: float = 0.0

    # Voting
    meetings: int = 0
    votes: int = 0
    skips: int = 0
    abstentions: int = 0
    accuracy_votes: int = 0
    enemy_votes: int = 0
    meetings_with_votes: int = 0
    early_votes: int = 0

    # Deaths / kills (games with complete death information only)
    death_games: int = 0
    deaths: int = 0
    day1_deaths: int = 0
    kills: int = 0
    camp_death_games: dict[str, int] = field(default_factory=_camp_counter)
    camp_kills: dict[str, int] = field(default_factory=_camp_counter)

    # Hunter
    hunter_games: int = 0
    hunter_kills: int = 0
    hunter_good_kills: int = 0

    # Loot
    loot: float = 0.0
    loot_duration: float = 0.0
    camp_loot: dict[str, float] = field(default_factory=_camp_counter)
    camp_loot_duration: dict[str, float] = field(default_factory=_camp_counter)

    # Series
    current_win_streak: int = 0
    current_loss_streak: int = 0
    longest_win_streak: int = 0
    longest_loss_streak: int = 0

    def copy(self) -> MetricTotals:
        return MetricTotals.from_dict(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetricTotals:
        """
        Rebuild totals written by to_dict.

        Raises:
            TypeError: if the data is missing the player id or a field holds
                a value of the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"totals must be an object, got {type(data).__name__}")
        values = {
            f.name: _checked_total(f.name, f.type, data[f.name])
            for f in fields(cls)
            if f.name in data
        }
        totals = cls(**values)
        # Missing camps (older snapshots) default to zero
        for name in ("camp_games", "camp_wins", "camp_death_games", "camp_kills", "camp_loot", "camp_loot_duration"):
            counter = _camp_counter()
            counter.update(getattr(totals, name))
            setattr(totals, name, counter)
        totals.role_counts = dict(totals.role_counts)
        return totals


# ============================================================================
# Derived metrics
# ============================================================================


def _stat(key: str) -> Any:
    return field(default=None, metadata={"stat": key})


@dataclass
class MetricSet:
    """
    Derived metrics for one player.

    Every percentile stat is an explicit nullable field; None means the
    sample was too small and is never replaced by zero. The ``stat``
    metadata holds the registry key used by rule tables and reports.
    """

    player_id: str
    player_name: str = ""
    games: int = 0
    camp_games: dict[str, int] = field(default_factory=dict)
    role_counts: dict[str, int] = field(default_factory=dict)

    talking_per_60min: float | None = _stat("talkingPer60Min")
    talking_outside_per_60min: float | None = _stat("talkingOutsidePer60Min")
    talking_during_per_60min: float | None = _stat("talkingDuringPer60Min")
    kill_rate: float | None = _stat("killRate")
    kill_rate_villageois: float | None = _stat("killRateVillageois")
    kill_rate_loup: float | None = _stat("killRateLoup")
    kill_rate_solo: float | None = _stat("killRateSolo")
    survival_rate: float | None = _stat("survivalRate")
    survival_day1_rate: float | None = _stat("survivalDay1Rate")
    loot_per_60min: float | None = _stat("lootPer60Min")
    loot_villageois_per_60min: float | None = _stat("lootVillageoisPer60Min")
    loot_loup_per_60min: float | None = _stat("lootLoupPer60Min")
    voting_aggressiveness: float | None = _stat("votingAggressiveness")
    voting_first: float | None = _stat("votingFirst")
    voting_accuracy: float | None = _stat("votingAccuracy")
    hunter_accuracy: float | None = _stat("hunterAccuracy")
    win_rate: float | None = _stat("winRate")
    win_rate_villageois: float | None = _stat("winRateVillageois")
    win_rate_loup: float | None = _stat("winRateLoup")
    win_rate_solo: float | None = _stat("winRateSolo")
    longest_win_series: float | None = _stat("longestWinSeries")
    longest_loss_series: float | None = _stat("longestLossSeries")
    games_played: float | None = _stat("gamesPlayed")
    camp_villageois_percent: float | None = _stat("campVillageoisPercent")
    camp_loup_percent: float | None = _stat("campLoupPercent")
    camp_solo_percent: float | None = _stat("campSoloPercent")

    @classmethod
    def stat_fields(cls) -> Mapping[str, str]:
        """Registry key -> attribute name, in declaration order."""
        return _STAT_FIELDS

    def stat_values(self) -> dict[str, float | None]:
        return {key: getattr(self, name) for key, name in self.stat_fields().items()}

    def get(self, stat_key: str) -> float | None:
        name = self.stat_fields().get(stat_key)
        return getattr(self, name) if name else None

    def camp_win_rates(self) -> dict[Camp, float]:
        """Camp win rates that are present."""
        rates = {
            Camp.VILLAGEOIS: self.win_rate_villageois,
            Camp.LOUP: self.win_rate_loup,
            Camp.SOLO: self.win_rate_solo,
        }
        return {camp: rate for camp, rate in rates.items() if rate is not None}

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "games": self.games,
            "campGames": dict(self.camp_games),
            "roleCounts": dict(self.role_counts),
            "stats": self.stat_values(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetricSet:
        """
        Raises:
            KeyError: if the player id is missing
            TypeError: if a value has the wrong type
        """
        player_id = data["playerId"]
        player_name = data.get("playerName", "")
        if not isinstance(player_id, str) or not isinstance(player_name, str):
            raise TypeError(f"player id and name must be strings, got {player_id!r}, {player_name!r}")
        metric_set = cls(
            player_id=player_id,
            player_name=player_name,
            games=stored_number(data.get("games", 0), "games", integral=True),
            camp_games=_checked_counter("campGames", data.get("campGames") or {}, integral=True),
            role_counts=_checked_counter("roleCounts", data.get("roleCounts") or {}, integral=True),
        )
        stats = data.get("stats") or {}
        if not isinstance(stats, dict):
            raise TypeError(f"stats must be an object, got {stats!r}")
        for key, name in _STAT_FIELDS.items():
            value = stats.get(key)
            setattr(metric_set, name, None if value is None else stored_number(value, key))
        return metric_set


_STAT_FIELDS: Mapping[str, str] = MappingProxyType(
    {f.metadata["stat"]: f.name for f in fields(MetricSet) if "stat" in f.metadata}
)


def metrics_settings_hash(config: MetricsConfig) -> str:
    """Hash of every setting that changes derived metrics (not totals)."""
    return compute_content_hash(json.dumps(asdict(config), sort_keys=True))


# ============================================================================
# Aggregator
# ============================================================================


def is_alive_at_meeting(entry: ParticipantEntry, meeting: int) -> bool:
    """
    Whether a participant takes part in a meeting.

    ``M<n>`` deaths happen at meeting n (still present for it);
    ``N<d>``/``J<d>`` deaths happen before meeting d.
    """
    timing = entry.death_timing
    if not timing:
        return True
    prefix, number = timing[0], timing[1:]
    if not number.isdigit():
        return True
    if prefix == "M":
        return meeting <= int(number)
    if prefix in ("N", "J"):
        return meeting < int(number)
    return True


class MetricAggregator:
    """
    Explicit reducer: (totals, game) -> totals.

    The aggregator never mutates the totals it is given; ``fold`` returns a
    new mapping with copies of every player it touched.
    """

    def __init__(self, config: MetricsConfig | None = None):
        self.config = config or MetricsConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def aggregate(self, games: Iterable[GameRecord]) -> dict[str, MetricSet]:
        """Full recompute: fold every game from scratch and derive metrics."""
        return self.derive_all(self.fold({}, games))

    def fold(
        self, totals: Mapping[str, MetricTotals], games: Iterable[GameRecord]
    ) -> dict[str, MetricTotals]:
        """Fold games (sorted chronologically here) into a copy of ``totals``."""
        result = {player_id: player_totals.copy() for player_id, player_totals in totals.items()}
        for game in sorted(games, key=lambda g: g.order_key):
            self._fold_game(result, game)
        return result

    def derive_all(self, totals: Mapping[str, MetricTotals]) -> dict[str, MetricSet]:
        return {player_id: self.derive(player_totals) for player_id, player_totals in totals.items()}

    def derive(self, totals: MetricTotals) -> MetricSet:
        """Turn raw totals into nullable rates."""
        cfg = self.config
        min_camp = {camp: cfg.min_camp_games.get(camp, 0) for camp in CAMPS}

        def camp_win_rate(camp: str) -> float | None:
            if totals.camp_games[camp] < min_camp[camp]:
                return None
            return safe_rate(totals.camp_wins[camp], totals.camp_games[camp])

        def camp_kill_rate(camp: str) -> float | None:
            if totals.camp_death_games[camp] < min_camp[camp]:
                return None
            return safe_rate(totals.camp_kills[camp], totals.camp_death_games[camp], scale=1.0)

        def camp_loot(camp: str) -> float | None:
            if totals.camp_games[camp] < min_camp[camp]:
                return None
            return safe_rate(totals.camp_loot[camp], totals.camp_loot_duration[camp], scale=3600.0)

        voting_aggressiveness = None
        if totals.meetings > 0:
            vote_pct = totals.votes / totals.meetings * 100
            skip_pct = totals.skips / totals.meetings * 100
            abstention_pct = totals.abstentions / totals.meetings * 100
            voting_aggressiveness = vote_pct - SKIP_PENALTY * skip_pct - ABSTENTION_PENALTY * abstention_pct

        hunter_accuracy = None
        if totals.hunter_games >= cfg.min_hunter_games and totals.hunter_kills > 0:
            hunter_accuracy = totals.hunter_good_kills / totals.hunter_kills * 100

        survival_rate = None
        survival_day1_rate = None
        if totals.death_games > 0:
            survival_rate = (totals.death_games - totals.deaths) / totals.death_games * 100
            survival_day1_rate = (totals.death_games - totals.day1_deaths) / totals.death_games * 100

        return MetricSet(
            player_id=totals.player_id,
            player_name=totals.player_name,
            games=totals.games,
            camp_games={camp: count for camp, count in totals.camp_games.items() if count},
            role_counts=dict(totals.role_counts),
            talking_per_60min=safe_rate(
                totals.talk_outside + totals.talk_during, totals.talk_duration, scale=3600.0
            ),
            talking_outside_per_60min=safe_rate(totals.talk_outside, totals.talk_duration, scale=3600.0),
            talking_during_per_60min=safe_rate(totals.talk_during, totals.talk_duration, scale=3600.0),
            kill_rate=safe_rate(totals.kills, totals.death_games, scale=1.0),
            kill_rate_villageois=camp_kill_rate(Camp.VILLAGEOIS),
            kill_rate_loup=camp_kill_rate(Camp.LOUP),
            kill_rate_solo=camp_kill_rate(Camp.SOLO),
            survival_rate=survival_rate,
            survival_day1_rate=survival_day1_rate,
            loot_per_60min=safe_rate(totals.loot, totals.loot_duration, scale=3600.0),
            loot_villageois_per_60min=camp_loot(Camp.VILLAGEOIS),
            loot_loup_per_60min=camp_loot(Camp.LOUP),
            voting_aggressiveness=voting_aggressiveness,
            voting_first=safe_rate(
                totals.early_votes,
                totals.meetings_with_votes,
                min_denominator=cfg.min_meetings_for_first_vote,
            ),
            voting_accuracy=safe_rate(
                totals.enemy_votes,
                totals.accuracy_votes,
                min_denominator=cfg.min_votes_for_accuracy,
            ),
            hunter_accuracy=hunter_accuracy,
            win_rate=safe_rate(totals.wins, totals.games),
            win_rate_villageois=camp_win_rate(Camp.VILLAGEOIS),
            win_rate_loup=camp_win_rate(Camp.LOUP),
            win_rate_solo=camp_win_rate(Camp.SOLO),
            longest_win_series=float(totals.longest_win_streak) if totals.games else None,
            longest_loss_series=float(totals.longest_loss_streak) if totals.games else None,
            games_played=float(totals.games) if totals.games else None,
            camp_villageois_percent=safe_rate(totals.camp_games[Camp.VILLAGEOIS], totals.games),
            camp_loup_percent=safe_rate(totals.camp_games[Camp.LOUP], totals.games),
            camp_solo_percent=safe_rate(totals.camp_games[Camp.SOLO], totals.games),
        )

    # ------------------------------------------------------------------
    # Per-game folding
    # ------------------------------------------------------------------

    def _fold_game(self, totals: dict[str, MetricTotals], game: GameRecord) -> None:
        if not game.players:
            logger.warning(f"Skipping game {game.id}: no participant roster")
            return

        by_entry: dict[int, MetricTotals] = {}
        for index, entry in enumerate(game.players):
            player_totals = totals.get(entry.player_id)
            if player_totals is None:
                player_totals = MetricTotals(player_id=entry.player_id)
                totals[entry.player_id] = player_totals
            if entry.username:
                player_totals.player_name = entry.username
            by_entry[index] = player_totals

        self._fold_participation(game, by_entry)
        self._fold_talking(game, by_entry)
        self._fold_voting(game, by_entry)
        self._fold_deaths(game, by_entry, totals)
        self._fold_hunter(game, by_entry, totals)
        self._fold_loot(game, by_entry)

    def _fold_participation(self, game: GameRecord, by_entry: dict[int, MetricTotals]) -> None:
        for index, entry in enumerate(game.players):
            player_totals = by_entry[index]
            camp = entry.main_camp.value
            player_totals.games += 1
            player_totals.camp_games[camp] += 1

            role = entry.effective_role
            if role:
                player_totals.role_counts[role] = player_totals.role_counts.get(role, 0) + 1

            if entry.victorious:
                player_totals.wins += 1
                player_totals.camp_wins[camp] += 1
                player_totals.current_win_streak += 1
                player_totals.current_loss_streak = 0
                player_totals.longest_win_streak = max(
                    player_totals.longest_win_streak, player_totals.current_win_streak
                )
            else:
                player_totals.current_loss_streak += 1
                player_totals.current_win_streak = 0
                player_totals.longest_loss_streak = max(
                    player_totals.longest_loss_streak, player_totals.current_loss_streak
                )

    def _fold_talking(self, game: GameRecord, by_entry: dict[int, MetricTotals]) -> None:
        if not game.has_talk_data:
            return
        for index, entry in enumerate(game.players):
            duration = game.play_seconds(entry)
            if duration is None or duration <= 0:
                continue
            player_totals = by_entry[index]
            player_totals.talk_outside += entry.seconds_talked_outside or 0.0
            player_totals.talk_during += entry.seconds_talked_during or 0.0
            player_totals.talk_duration += duration

    def _fold_voting(self, game: GameRecord, by_entry: dict[int, MetricTotals]) -> None:
        fraction = self.config.early_vote_fraction
        for meeting in range(1, game.max_meeting + 1):
            # Early voters: dated real votes, earliest first
            dated = [
                (vote.date, index)
                for index, entry in enumerate(game.players)
                for vote in entry.votes_on(meeting)
                if vote.target and not vote.is_skip and vote.date is not None
            ]
            if dated:
                dated.sort(key=lambda item: item[0])
                early_count = math.ceil(len(dated) * fraction)
                for position, (_, index) in enumerate(dated):
                    by_entry[index].meetings_with_votes += 1
                    if position < early_count:
                        by_entry[index].early_votes += 1

            for index, entry in enumerate(game.players):
                if not is_alive_at_meeting(entry, meeting):
                    continue
                player_totals = by_entry[index]
                player_totals.meetings += 1

                votes = entry.votes_on(meeting)
                if not votes:
                    player_totals.abstentions += 1
                    continue
                vote = votes[0]
                if vote.is_skip:
                    player_totals.skips += 1
                    continue

                player_totals.votes += 1
                target = game.find_player(vote.target)
                if target is not None:
                    player_totals.accuracy_votes += 1
                    if target.final_camp != entry.final_camp:
                        player_totals.enemy_votes += 1

    def _fold_deaths(
        self,
        game: GameRecord,
        by_entry: dict[int, MetricTotals],
        totals: dict[str, MetricTotals],
    ) -> None:
        if not game.death_info_complete:
            return
        for index, entry in enumerate(game.players):
            player_totals = by_entry[index]
            player_totals.death_games += 1
            player_totals.camp_death_games[entry.main_camp.value] += 1
            if entry.died:
                player_totals.deaths += 1
                if entry.death_timing in DAY1_DEATH_TIMINGS:
                    player_totals.day1_deaths += 1

        for victim in game.players:
            if not victim.killer_name or (victim.death_type or "") in NON_KILL_DEATH_TYPES:
                continue
            killer = game.find_player(victim.killer_name)
            if killer is None:
                continue
            killer_totals = totals[killer.player_id]
            killer_totals.kills += 1
            killer_totals.camp_kills[killer.main_camp.value] += 1

    def _fold_hunter(
        self,
        game: GameRecord,
        by_entry: dict[int, MetricTotals],
        totals: dict[str, MetricTotals],
    ) -> None:
        hunters = {entry.username for entry in game.players if entry.is_hunter}
        if not hunters:
            return
        for index, entry in enumerate(game.players):
            if entry.is_hunter:
                by_entry[index].hunter_games += 1

        for victim in game.players:
            if victim.death_type not in HUNTER_BULLET_TYPES or victim.killer_name not in hunters:
                continue
            hunter = game.find_player(victim.killer_name)
            if hunter is None:
                continue
            hunter_totals = totals[hunter.player_id]
            hunter_totals.hunter_kills += 1
            if victim.main_camp != Camp.VILLAGEOIS:
                hunter_totals.hunter_good_kills += 1

    def _fold_loot(self, game: GameRecord, by_entry: dict[int, MetricTotals]) -> None:
        if not game.has_loot_data:
            return

        durations = [game.play_seconds(entry) for entry in game.players]
        positive_total = sum(d for d in durations if d is not None and d > 0)

        for index, entry in enumerate(game.players):
            duration = durations[index]
            if duration is None or duration <= 0:
                continue

            if entry.collected_loot is not None:
                loot = entry.collected_loot
            elif game.harvest_done is not None:
                # Share of the team harvest proportional to time alive
                loot = duration / positive_total * game.harvest_done
            else:
                continue

            player_totals = by_entry[index]
            camp = entry.main_camp.value
            player_totals.loot += loot
            player_totals.loot_duration += duration
            player_totals.camp_loot[camp] += loot
            player_totals.camp_loot_duration[camp] += duration
