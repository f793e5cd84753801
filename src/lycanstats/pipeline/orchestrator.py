"""
Stats Orchestrator - Main pipeline for processing the game log.

Run sequence: load -> slice -> cache-assisted aggregation ->
titles / achievements -> reports -> persist. Nothing is written until every
step before persistence has succeeded, so a failed run leaves the previous
cache and reports untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from lycanstats.analysis.achievements import AchievementEngine, PlayerAchievements
from lycanstats.analysis.metrics import MetricAggregator, MetricSet
from lycanstats.analysis.percentiles import PercentileClassifier
from lycanstats.analysis.titles import TitleAssigner, TitlesResult
from lycanstats.core.config import LycanStatsConfig, get_config
from lycanstats.core.gamelog import SLICE_MODDED, SLICES, load_game_log, select_slice
from lycanstats.core.schemas import GameRecord
from lycanstats.core.utils import PerformanceMonitor, atomic_write_json
from lycanstats.infra.cache import CacheRefresh, CacheSnapshot, CacheState, IncrementalCache
from lycanstats.rules.table import RuleTable, load_rule_table

logger = logging.getLogger(__name__)

REPORT_VERSION = "1.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RunResult:
    """Everything one pipeline run produced."""

    games: list[GameRecord]
    refreshes: dict[str, CacheRefresh]
    titles: TitlesResult | None = None
    achievements: dict[str, PlayerAchievements] | None = None
    titles_report: dict[str, Any] | None = None
    achievements_report: dict[str, Any] | None = None
    written: list[Path] = field(default_factory=list)

    def metrics(self, slice_name: str = SLICE_MODDED) -> dict[str, MetricSet]:
        return self.refreshes[slice_name].metrics

    @property
    def fast_path(self) -> bool:
        return all(refresh.fast_path for refresh in self.refreshes.values())


class StatsOrchestrator:
    """
    Orchestrates the complete batch.

    Handles:
    - Game log loading and slicing
    - Cache-assisted metric aggregation for every slice
    - Title and achievement computation on the modded slice
    - Report building and atomic persistence
    """

    def __init__(
        self,
        config: LycanStatsConfig | None = None,
        rules: RuleTable | None = None,
        *,
        use_cache: bool | None = None,
    ):
        self.config = config or get_config()
        self._rules = rules
        self.use_cache = self.config.cache.enabled if use_cache is None else use_cache
        self.aggregator = MetricAggregator(self.config.metrics)
        self.cache = IncrementalCache(self.config.cache_path, self.aggregator)

    @property
    def rules(self) -> RuleTable:
        """Rule table, loaded on first use so a bad rules file fails the run early."""
        if self._rules is None:
            rules_file = self.config.titles.rules_file
            self._rules = load_rule_table(Path(rules_file) if rules_file else None)
        return self._rules

    @property
    def output_dir(self) -> Path:
        return Path(self.config.data.output_dir)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def load_games(self, game_log: Path | None = None) -> list[GameRecord]:
        """
        Raises:
            GameLogError: if the game log cannot be read
        """
        path = Path(game_log) if game_log else Path(self.config.data.game_log)
        with PerformanceMonitor(f"Loading {path.name}", logging.DEBUG):
            return load_game_log(path)

    def aggregate(self, games: list[GameRecord]) -> tuple[CacheState, dict[str, CacheRefresh]]:
        """Bring every slice up to date. Returns the new cache state (not yet saved)."""
        state = self.cache.load() if self.use_cache else CacheState()
        refreshes = {}
        for slice_name in SLICES:
            slice_games = select_slice(games, slice_name)
            snapshot = state.snapshot(slice_name) if self.use_cache else CacheSnapshot()
            with PerformanceMonitor(f"Aggregating {slice_name} slice ({len(slice_games)} games)"):
                refreshes[slice_name] = self.cache.refresh(snapshot, slice_games)
        new_state = CacheState(
            slices={name: refresh.snapshot for name, refresh in refreshes.items()}
        )
        return new_state, refreshes

    def compute_titles(self, metric_sets: dict[str, MetricSet]) -> TitlesResult:
        assigner = TitleAssigner(self.rules, self.config.titles)
        with PerformanceMonitor("Assigning titles"):
            return assigner.generate(metric_sets)

    def compute_achievements(self, games: list[GameRecord]) -> dict[str, PlayerAchievements]:
        engine = AchievementEngine(self.rules)
        with PerformanceMonitor("Computing achievements"):
            return engine.compute(games)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def build_titles_report(self, result: TitlesResult, games_analyzed: int) -> dict[str, Any]:
        thresholds = PercentileClassifier(self.config.titles.percentile_thresholds).thresholds
        return {
            "version": REPORT_VERSION,
            "generatedAt": _now(),
            "totalPlayers": len(result.players),
            "minGamesRequired": self.config.titles.min_games,
            "gamesAnalyzed": games_analyzed,
            "percentileThresholds": {
                category.value: value for category, value in thresholds.items()
            },
            "uniquePrimaryTitles": result.unique_count,
            "fallbackPrimaryTitles": result.fallback_count,
            "players": {
                player_id: player.to_dict() for player_id, player in result.players.items()
            },
        }

    def build_achievements_report(
        self, achievements: dict[str, PlayerAchievements], total_games: int
    ) -> dict[str, Any]:
        return {
            "version": REPORT_VERSION,
            "generatedAt": _now(),
            "totalPlayers": len(achievements),
            "totalGames": total_games,
            "players": {
                player_id: player.to_dict() for player_id, player in achievements.items()
            },
        }

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def run(
        self,
        game_log: Path | None = None,
        *,
        titles: bool = True,
        achievements: bool = True,
        write: bool = True,
    ) -> RunResult:
        """
        Execute the whole batch.

        Raises:
            GameLogError: if the game log cannot be loaded (nothing is written)
            RuleTableError: if a configured rules file is malformed
        """
        games = self.load_games(game_log)
        modded_games = select_slice(games, SLICE_MODDED)
        logger.info(f"{len(games)} games loaded, {len(modded_games)} in the modded slice")

        state, refreshes = self.aggregate(games)
        result = RunResult(games=games, refreshes=refreshes)

        if titles:
            result.titles = self.compute_titles(refreshes[SLICE_MODDED].metrics)
            result.titles_report = self.build_titles_report(result.titles, len(modded_games))
        if achievements:
            result.achievements = self.compute_achievements(modded_games)
            result.achievements_report = self.build_achievements_report(
                result.achievements, len(modded_games)
            )

        if write:
            result.written = self.persist(result, state)
        return result

    def persist(self, result: RunResult, state: CacheState) -> list[Path]:
        """Write reports, then the cache. Every file is replaced atomically."""
        export_cfg = self.config.export
        written = []
        if result.titles_report is not None:
            path = self.output_dir / export_cfg.titles_file
            atomic_write_json(path, result.titles_report, indent=export_cfg.json_indent)
            written.append(path)
        if result.achievements_report is not None:
            path = self.output_dir / export_cfg.achievements_file
            atomic_write_json(path, result.achievements_report, indent=export_cfg.json_indent)
            written.append(path)
        if self.use_cache:
            self.cache.save(state)
            written.append(self.cache.path)
        for path in written:
            logger.debug(f"Wrote {path}")
        return written


def run_pipeline(
    config: LycanStatsConfig | None = None,
    game_log: Path | None = None,
    **kwargs: Any,
) -> RunResult:
    """Convenience function to run the batch with the given (or global) config."""
    return StatsOrchestrator(config).run(game_log, **kwargs)
