"""
Achievement evaluation.

Achievements are permanent, threshold based rewards. Each definition in the
rule table names an evaluator registered here; evaluators look at one
player's games (and, for a few, at the whole game list) and return a value
plus the ordered ids of the games that contributed to it. The engine turns
that into unlocked levels, the game where each level was crossed, and the
progress toward the next level.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from lycanstats.core.constants import HUNTER_BULLET_TYPES, Camp, DeathType
from lycanstats.core.gamelog import chronological
from lycanstats.core.schemas import GameRecord, ParticipantEntry
from lycanstats.rules.table import AchievementDefinition, RuleTable

logger = logging.getLogger(__name__)

PlayerGames = Sequence[tuple[GameRecord, ParticipantEntry]]


@dataclass
class EvaluatorResult:
    value: int = 0
    game_ids: list[str] = field(default_factory=list)

    def add(self, game: GameRecord, count: int = 1) -> None:
        self.value += count
        self.game_ids.append(game.id)


Evaluator = Callable[[PlayerGames, Sequence[GameRecord], str, dict[str, Any]], EvaluatorResult]

EVALUATORS: dict[str, Evaluator] = {}


def evaluator(name: str) -> Callable[[Evaluator], Evaluator]:
    """Register an evaluator under the name used in achievement definitions."""

    def decorator(func: Evaluator) -> Evaluator:
        EVALUATORS[name] = func
        return func

    return decorator


# ============================================================================
# Helpers
# ============================================================================

_DEATH_DAY = re.compile(r"[NJ](\d+)")


def _camp_param(name: str | None) -> Camp | None:
    if not name:
        return None
    try:
        return Camp(name.lower())
    except ValueError:
        return None


def _death_day(timing: str | None) -> int | None:
    if not timing:
        return None
    match = _DEATH_DAY.search(timing)
    return int(match.group(1)) if match else None


def _bullet_victims(game: GameRecord, hunter: ParticipantEntry) -> list[ParticipantEntry]:
    return [
        victim
        for victim in game.players
        if victim.death_type in HUNTER_BULLET_TYPES and victim.killer_name == hunter.username
    ]


def _wolf_victims(game: GameRecord, wolf: ParticipantEntry) -> list[ParticipantEntry]:
    return [
        victim
        for victim in game.players
        if victim.death_type == DeathType.BY_WOLF and victim.killer_name == wolf.username
    ]


def _count_if(player_games: PlayerGames, predicate: Callable[[GameRecord, ParticipantEntry], bool]) -> EvaluatorResult:
    result = EvaluatorResult()
    for game, entry in player_games:
        if predicate(game, entry):
            result.add(game)
    return result


# ============================================================================
# Victories
# ============================================================================


@evaluator("campWins")
def camp_wins(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    camp = _camp_param(params.get("camp"))
    if camp not in (Camp.VILLAGEOIS, Camp.LOUP):
        return EvaluatorResult()
    return _count_if(player_games, lambda g, e: e.victorious and e.main_camp == camp)


@evaluator("campLosses")
def camp_losses(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    camp = _camp_param(params.get("camp"))
    if camp not in (Camp.VILLAGEOIS, Camp.LOUP):
        return EvaluatorResult()
    return _count_if(player_games, lambda g, e: not e.victorious and e.main_camp == camp)


@evaluator("soloWins")
def solo_wins(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    return _count_if(player_games, lambda g, e: e.victorious and e.main_camp == Camp.SOLO)


@evaluator("wolfWinNoKills")
def wolf_win_no_kills(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    return _count_if(
        player_games,
        lambda g, e: e.victorious and e.main_camp == Camp.LOUP and not _wolf_victims(g, e),
    )


@evaluator("lastWolfStanding")
def last_wolf_standing(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if not entry.victorious or entry.main_camp != Camp.LOUP:
            return False
        survivors = [p for p in game.players if p.main_camp == Camp.LOUP and not p.died]
        return len(survivors) == 1 and survivors[0].player_id == player_id

    return _count_if(player_games, predicate)


@evaluator("winOnAllMaps")
def win_on_all_maps(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    all_maps = {game.map_name for game in all_games if game.map_name}
    won: set[str] = set()
    game_ids = []
    for game, entry in player_games:
        if entry.victorious and game.map_name and game.map_name not in won:
            won.add(game.map_name)
            game_ids.append(game.id)
    if all_maps and won == all_maps:
        return EvaluatorResult(1, game_ids)
    return EvaluatorResult()


@evaluator("winInColors")
def win_in_colors(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    min_colors = params.get("minColors") or 5
    won: set[str] = set()
    game_ids = []
    for game, entry in player_games:
        if entry.victorious and entry.color and entry.color not in won:
            won.add(entry.color)
            game_ids.append(game.id)
    if len(won) >= min_colors:
        return EvaluatorResult(1, game_ids)
    return EvaluatorResult()


# ============================================================================
# Deaths
# ============================================================================


@evaluator("deathByType")
def death_by_type(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    death_type = params.get("deathType")
    return _count_if(player_games, lambda g, e: e.death_type == death_type)


@evaluator("deathOnTiming")
def death_on_timing(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    timing = params.get("timing")
    return _count_if(player_games, lambda g, e: e.death_timing == timing)


@evaluator("votedAsCamp")
def voted_as_camp(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    camp = _camp_param(params.get("camp"))
    if camp not in (Camp.VILLAGEOIS, Camp.LOUP):
        return EvaluatorResult()
    return _count_if(player_games, lambda g, e: e.death_type == DeathType.VOTED and e.main_camp == camp)


@evaluator("roleDeathByType")
def role_death_by_type(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    camp = _camp_param(params.get("roleCamp"))
    death_type = params.get("deathType")
    if camp not in (Camp.VILLAGEOIS, Camp.LOUP):
        return EvaluatorResult()
    return _count_if(player_games, lambda g, e: e.death_type == death_type and e.main_camp == camp)


@evaluator("killerDiedSameDay")
def killer_died_same_day(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if not entry.death_timing or not entry.killer_name:
            return False
        killer = game.find_player(entry.killer_name)
        if killer is None or not killer.death_timing:
            return False
        day = _death_day(entry.death_timing)
        return day is not None and day == _death_day(killer.death_timing)

    return _count_if(player_games, predicate)


# ============================================================================
# Kills
# ============================================================================


@evaluator("wolfKills")
def wolf_kills(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    result = EvaluatorResult()
    for game, entry in player_games:
        if entry.main_camp != Camp.LOUP:
            continue
        kills = len(_wolf_victims(game, entry))
        if kills:
            # One id per game even when the game holds several kills
            result.add(game, kills)
    return result


@evaluator("hunterKillsEnemy")
def hunter_kills_enemy(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    result = EvaluatorResult()
    for game, entry in player_games:
        if not entry.is_hunter:
            continue
        for victim in _bullet_victims(game, entry):
            if victim.main_camp != entry.main_camp:
                result.add(game)
    return result


@evaluator("hunterKillsAlly")
def hunter_kills_ally(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    result = EvaluatorResult()
    for game, entry in player_games:
        if not entry.is_hunter:
            continue
        for victim in _bullet_victims(game, entry):
            if victim.main_camp == entry.main_camp:
                result.add(game)
    return result


@evaluator("hunterMultiKillsInGame")
def hunter_multi_kills_in_game(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    min_kills = params.get("minKills") or 2

    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if not entry.is_hunter:
            return False
        enemies = [v for v in _bullet_victims(game, entry) if v.main_camp != entry.main_camp]
        return len(enemies) >= min_kills

    return _count_if(player_games, predicate)


@evaluator("hunterKilledByWolf")
def hunter_killed_by_wolf(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    return _count_if(player_games, lambda g, e: e.is_hunter and e.death_type == DeathType.BY_WOLF)


@evaluator("assassinPotionKills")
def assassin_potion_kills(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    want_enemy = params.get("targetCamp") == "enemy"
    result = EvaluatorResult()
    for game, entry in player_games:
        for victim in game.players:
            if victim.death_type != DeathType.ASSASSIN or victim.killer_name != entry.username:
                continue
            if (victim.main_camp != entry.main_camp) == want_enemy:
                result.add(game)
    return result


@evaluator("killedByLoverWolf")
def killed_by_lover_wolf(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if entry.death_type != DeathType.BY_WOLF or not entry.killer_name:
            return False
        killer = game.find_player(entry.killer_name)
        return killer is not None and killer.is_lover

    return _count_if(player_games, predicate)


# ============================================================================
# Roles
# ============================================================================


@evaluator("agentVoted")
def agent_voted(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    return _count_if(
        player_games, lambda g, e: e.main_role_initial == "Agent" and e.death_type == DeathType.VOTED
    )


@evaluator("louveteauOrphanWin")
def louveteau_orphan_win(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if entry.main_role_initial != "Louveteau" or not entry.victorious:
            return False
        others = [p for p in game.players if p.player_id != player_id and p.main_camp == Camp.LOUP]
        return bool(others) and all(p.died for p in others)

    return _count_if(player_games, predicate)


@evaluator("winWithAllSoloRoles")
def win_with_all_solo_roles(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    all_roles = {
        entry.main_role_initial
        for game in all_games
        for entry in game.players
        if entry.main_camp == Camp.SOLO and entry.main_role_initial
    }
    won: set[str] = set()
    game_ids = []
    for game, entry in player_games:
        role = entry.main_role_initial
        if entry.victorious and entry.main_camp == Camp.SOLO and role and role not in won:
            won.add(role)
            game_ids.append(game.id)
    if all_roles and won == all_roles:
        return EvaluatorResult(1, game_ids)
    return EvaluatorResult()


# ============================================================================
# Social
# ============================================================================


@evaluator("talkingPercentage")
def talking_percentage(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    min_pct = params.get("minPercentage") or 50

    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        total = sum(p.seconds_talked for p in game.players)
        return total > 0 and entry.seconds_talked / total * 100 >= min_pct

    return _count_if(player_games, predicate)


@evaluator("correctVoteButVoted")
def correct_vote_but_voted(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if entry.death_type != DeathType.VOTED or entry.main_camp != Camp.VILLAGEOIS:
            return False
        for vote in entry.votes:
            if not vote.is_real:
                continue
            target = game.find_player(vote.target)
            if target is not None and target.main_camp != Camp.VILLAGEOIS:
                return True
        return False

    return _count_if(player_games, predicate)


@evaluator("unanimousVoteAsVillager")
def unanimous_vote_as_villager(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if entry.death_type != DeathType.VOTED or entry.main_camp != Camp.VILLAGEOIS:
            return False
        for day in dict.fromkeys(vote.day for vote in entry.votes):
            real = [v for p in game.players for v in p.votes_on(day) if v.is_real]
            if len(real) >= 3 and all(v.target == entry.username for v in real):
                return True
        return False

    return _count_if(player_games, predicate)


@evaluator("onlyPasserInMeeting")
def only_passer_in_meeting(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        for vote in entry.votes:
            if not vote.is_skip:
                continue
            day_votes = [(p, v) for p in game.players for v in p.votes_on(vote.day)]
            other_passers = sum(1 for p, v in day_votes if v.is_skip and p.player_id != player_id)
            if other_passers == 0 and len(day_votes) >= 3:
                return True
        return False

    return _count_if(player_games, predicate)


@evaluator("soleVoterElimination")
def sole_voter_elimination(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        for vote in entry.votes:
            if not vote.is_real:
                continue
            target = game.find_player(vote.target)
            if target is None or target.death_type != DeathType.VOTED:
                continue
            others = [
                p
                for p in game.players
                if p.player_id != player_id
                and any(v.target == vote.target for v in p.votes_on(vote.day))
            ]
            if not others:
                return True
        return False

    return _count_if(player_games, predicate)


@evaluator("consecutiveCorrectVotes")
def consecutive_correct_votes(
    player_games: PlayerGames, all_games: Sequence[GameRecord], player_id: str, params: dict[str, Any]
) -> EvaluatorResult:
    min_consecutive = params.get("minConsecutive") or 5

    def predicate(game: GameRecord, entry: ParticipantEntry) -> bool:
        if entry.main_camp != Camp.VILLAGEOIS:
            return False
        streak = 0
        for vote in sorted(entry.votes, key=lambda v: v.day):
            target = game.find_player(vote.target) if vote.is_real else None
            if target is None or target.main_camp == Camp.VILLAGEOIS:
                streak = 0
                continue
            streak += 1
            if streak >= min_consecutive:
                return True
        return False

    return _count_if(player_games, predicate)


# ============================================================================
# Engine
# ============================================================================


@dataclass(frozen=True)
class UnlockedLevel:
    stars: int
    threshold: int
    unlocked_at_game: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"stars": self.stars, "threshold": self.threshold, "unlockedAtGame": self.unlocked_at_game}


@dataclass
class AchievementProgress:
    id: str
    current_value: int
    unlocked_levels: list[UnlockedLevel]
    next_level: dict[str, int] | None
    progress: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "currentValue": self.current_value,
            "unlockedLevels": [level.to_dict() for level in self.unlocked_levels],
            "nextLevel": self.next_level,
            "progress": round(self.progress, 4),
        }


@dataclass
class PlayerAchievements:
    player_id: str
    player_name: str
    achievements: list[AchievementProgress] = field(default_factory=list)

    @property
    def total_unlocked(self) -> int:
        return sum(len(a.unlocked_levels) for a in self.achievements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "totalUnlocked": self.total_unlocked,
            "achievements": [a.to_dict() for a in self.achievements],
        }


def resolve_levels(definition: AchievementDefinition, result: EvaluatorResult) -> AchievementProgress:
    """Unlocked levels (with the game that crossed each threshold) and progress."""
    unlocked = []
    next_level = None
    ids = result.game_ids
    for level in definition.levels:
        if result.value >= level.threshold:
            if len(ids) >= level.threshold:
                game_id = ids[level.threshold - 1]
            else:
                game_id = ids[-1] if ids else None
            unlocked.append(UnlockedLevel(level.stars, level.threshold, game_id))
        elif next_level is None:
            next_level = {"stars": level.stars, "threshold": level.threshold}

    progress = min(result.value / next_level["threshold"], 0.99) if next_level else 1.0
    return AchievementProgress(
        id=definition.id,
        current_value=result.value,
        unlocked_levels=unlocked,
        next_level=next_level,
        progress=progress,
    )


class AchievementEngine:
    """Runs every achievement definition for every player."""

    def __init__(self, rules: RuleTable):
        self.rules = rules

    def compute(self, games: Sequence[GameRecord]) -> dict[str, PlayerAchievements]:
        ordered = chronological(games)

        player_games: dict[str, list[tuple[GameRecord, ParticipantEntry]]] = {}
        names: dict[str, str] = {}
        for game in ordered:
            for entry in game.players:
                player_games.setdefault(entry.player_id, []).append((game, entry))
                names.setdefault(entry.player_id, entry.username or entry.player_id)

        definitions = []
        for definition in self.rules.achievements:
            if definition.evaluator not in EVALUATORS:
                logger.warning(f"Unknown evaluator {definition.evaluator} for achievement {definition.id}")
                continue
            definitions.append(definition)

        logger.info(f"Computing {len(definitions)} achievements for {len(player_games)} players")

        results = {}
        for player_id, games_of_player in player_games.items():
            progress = []
            for definition in definitions:
                result = EVALUATORS[definition.evaluator](
                    games_of_player, ordered, player_id, definition.params
                )
                if result.value == 0:
                    continue
                progress.append(resolve_levels(definition, result))
            results[player_id] = PlayerAchievements(player_id, names[player_id], progress)
        return results
