"""
lycanstats - Player statistics for Lycans game logs

Turns a history of completed games into per-player metrics, percentile-based
titles (each title primary for at most one player) and tiered achievements,
with an incremental cache so unchanged games are never aggregated twice.

Usage:
    from lycanstats import StatsOrchestrator, load_config

    result = StatsOrchestrator(load_config()).run()
    for player in result.titles.players.values():
        print(f"{player.player_name}: {player.primary_title.title}")
"""

__version__ = "0.1.0"
__author__ = "lycanstats Contributors"


def __getattr__(name):
    """Lazy import for heavy dependencies."""
    if name == "StatsOrchestrator":
        from lycanstats.pipeline.orchestrator import StatsOrchestrator
        return StatsOrchestrator
    elif name == "run_pipeline":
        from lycanstats.pipeline.orchestrator import run_pipeline
        return run_pipeline
    elif name == "load_config":
        from lycanstats.core.config import load_config
        return load_config
    elif name == "load_game_log":
        from lycanstats.core.gamelog import load_game_log
        return load_game_log
    elif name == "MetricAggregator":
        from lycanstats.analysis.metrics import MetricAggregator
        return MetricAggregator
    elif name == "TitleAssigner":
        from lycanstats.analysis.titles import TitleAssigner
        return TitleAssigner
    elif name == "AchievementEngine":
        from lycanstats.analysis.achievements import AchievementEngine
        return AchievementEngine
    elif name == "IncrementalCache":
        from lycanstats.infra.cache import IncrementalCache
        return IncrementalCache
    elif name == "load_rule_table":
        from lycanstats.rules.table import load_rule_table
        return load_rule_table
    raise AttributeError(f"module 'lycanstats' has no attribute '{name}'")


__all__ = [
    # Version
    "__version__",
    # Pipeline
    "StatsOrchestrator",
    "run_pipeline",
    "load_config",
    "load_game_log",
    # Engines
    "MetricAggregator",
    "TitleAssigner",
    "AchievementEngine",
    "IncrementalCache",
    "load_rule_table",
]
