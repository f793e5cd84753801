"""
lycanstats CLI - Command Line Interface for Lycans player statistics

Provides commands for:
- Computing titles and achievements from the game log
- Exporting the per-player metric table
- Inspecting a single player
- Managing the incremental cache and the config file
"""

import logging
from dataclasses import replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lycanstats import __version__
from lycanstats.core.config import (
    LoggingConfig,
    LycanStatsConfig,
    generate_default_config,
    get_config,
    load_config,
    set_config,
)
from lycanstats.core.errors import LycanStatsError
from lycanstats.core.gamelog import SLICE_MODDED, SLICES
from lycanstats.core.utils import format_percentage
from lycanstats.export import export_metrics
from lycanstats.pipeline.orchestrator import StatsOrchestrator

app = typer.Typer(
    name="lycanstats",
    help="Player statistics, titles and achievements for Lycans game logs",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Configure root logging from the config section (console + optional rotating file)."""
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.format)
    root = logging.getLogger()
    root.setLevel(level)

    if config.file and not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            config.file,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(config.format))
        root.addHandler(handler)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]lycanstats[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (.yaml, .toml or .json)",
        dir_okay=False,
    ),
) -> None:
    """lycanstats - Lycans player statistics"""
    config = load_config(config_file)
    set_config(config)
    setup_logging(config.logging, verbose)


def _run_config(
    game_log: Optional[Path],
    output_dir: Optional[Path],
    no_cache: bool,
) -> LycanStatsConfig:
    """Global config with command-line overrides applied on top."""
    config = get_config()
    if game_log is not None:
        config = replace(config, data=replace(config.data, game_log=str(game_log)))
    if output_dir is not None:
        config = replace(config, data=replace(config.data, output_dir=str(output_dir)))
    if no_cache:
        config = replace(config, cache=replace(config.cache, enabled=False))
    return config


GameLogOption = typer.Option(None, "--game-log", "-g", help="Game log JSON file")
OutputDirOption = typer.Option(None, "--output-dir", "-o", help="Directory for reports and cache")
NoCacheOption = typer.Option(False, "--no-cache", help="Recompute everything and do not touch the cache")


@app.command()
def titles(
    game_log: Optional[Path] = GameLogOption,
    output_dir: Optional[Path] = OutputDirOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """
    Compute titles for every eligible player and write the titles report.
    """
    orchestrator = StatsOrchestrator(_run_config(game_log, output_dir, no_cache))
    try:
        result = orchestrator.run(titles=True, achievements=False)
    except LycanStatsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    titles_result = result.titles
    table = Table(title="Primary Titles")
    table.add_column("Player", style="cyan")
    table.add_column("Games", justify="right")
    table.add_column("Title", style="green")
    table.add_column("Type", style="magenta")
    for player in sorted(titles_result.players.values(), key=lambda p: p.player_name.lower()):
        primary = player.primary_title
        table.add_row(
            player.player_name,
            str(player.games_played),
            f"{primary.emoji} {primary.title}" if primary else "-",
            primary.type if primary else "-",
        )
    console.print(table)

    console.print(
        Panel(
            f"[cyan]Eligible players:[/cyan] {titles_result.eligible_count}\n"
            f"[cyan]Unique primary titles:[/cyan] {titles_result.unique_count}\n"
            f"[cyan]Fallback titles:[/cyan] {titles_result.fallback_count}\n"
            f"[cyan]Cache fast path:[/cyan] {'yes' if result.fast_path else 'no'}",
            title="[bold blue]Titles[/bold blue]",
            expand=False,
        )
    )
    for path in result.written:
        console.print(f"[green]Wrote[/green] {path}")


@app.command()
def achievements(
    game_log: Optional[Path] = GameLogOption,
    output_dir: Optional[Path] = OutputDirOption,
    no_cache: bool = NoCacheOption,
    top: int = typer.Option(20, "--top", "-n", help="Number of players to list"),
) -> None:
    """
    Compute achievements for every player and write the achievements report.
    """
    orchestrator = StatsOrchestrator(_run_config(game_log, output_dir, no_cache))
    try:
        result = orchestrator.run(titles=False, achievements=True)
    except LycanStatsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    ranked = sorted(
        result.achievements.values(),
        key=lambda p: (-p.total_unlocked, p.player_name.lower()),
    )
    table = Table(title="Achievements")
    table.add_column("Player", style="cyan")
    table.add_column("Levels", justify="right", style="green")
    table.add_column("Achievements", justify="right")
    for player in ranked[:top]:
        table.add_row(player.player_name, str(player.total_unlocked), str(len(player.achievements)))
    console.print(table)
    for path in result.written:
        console.print(f"[green]Wrote[/green] {path}")


@app.command()
def stats(
    output: Path = typer.Option(
        ...,
        "--output",
        "-f",
        help="Output file (format detected from extension: .json or .csv)",
    ),
    slice_name: str = typer.Option(SLICE_MODDED, "--slice", "-s", help="Dataset slice: all or modded"),
    game_log: Optional[Path] = GameLogOption,
    output_dir: Optional[Path] = OutputDirOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """
    Export the per-player metric table (with percentiles for eligible players).
    """
    if slice_name not in SLICES:
        console.print(f"[red]Error:[/red] unknown slice {slice_name!r} (use one of {', '.join(SLICES)})")
        raise typer.Exit(1)

    config = _run_config(game_log, output_dir, no_cache)
    orchestrator = StatsOrchestrator(config)
    try:
        games = orchestrator.load_games()
        state, refreshes = orchestrator.aggregate(games)
        metric_sets = refreshes[slice_name].metrics
        titles_result = orchestrator.compute_titles(refreshes[SLICE_MODDED].metrics)
        percentiles = {}
        if slice_name == SLICE_MODDED:
            percentiles = {pid: player.percentiles for pid, player in titles_result.players.items()}
        export_metrics(
            metric_sets,
            output,
            percentiles=percentiles,
            indent=config.export.json_indent,
            delimiter=config.export.csv_delimiter,
        )
        if orchestrator.use_cache:
            orchestrator.cache.save(state)
    except (LycanStatsError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Player Metrics ({slice_name})")
    table.add_column("Player", style="cyan")
    table.add_column("Games", justify="right")
    table.add_column("Win rate", justify="right", style="green")
    table.add_column("Talk /60min", justify="right")
    table.add_column("Survival", justify="right")
    for metric_set in sorted(metric_sets.values(), key=lambda m: -m.games):
        talk = metric_set.talking_per_60min
        table.add_row(
            metric_set.player_name,
            str(metric_set.games),
            format_percentage(metric_set.win_rate),
            f"{talk:.0f}s" if talk is not None else "-",
            format_percentage(metric_set.survival_rate),
        )
    console.print(table)
    console.print(f"[green]Exported {len(metric_sets)} players to[/green] {output}")


@app.command()
def player(
    name: str = typer.Argument(..., help="Player name or id"),
    game_log: Optional[Path] = GameLogOption,
    output_dir: Optional[Path] = OutputDirOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """
    Show one player's titles, metrics and achievement count.
    """
    orchestrator = StatsOrchestrator(_run_config(game_log, output_dir, no_cache))
    try:
        result = orchestrator.run(titles=True, achievements=True, write=False)
    except LycanStatsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    metric_sets = result.metrics(SLICE_MODDED)
    wanted = name.lower()
    metric_set = metric_sets.get(name) or next(
        (m for m in metric_sets.values() if m.player_name.lower() == wanted), None
    )
    if metric_set is None:
        console.print(f"[red]Error:[/red] no player named {name!r}")
        raise typer.Exit(1)

    player_titles = result.titles.players.get(metric_set.player_id)
    player_achievements = result.achievements.get(metric_set.player_id)

    lines = [f"[cyan]Games:[/cyan] {metric_set.games}"]
    if player_titles and player_titles.primary_title:
        primary = player_titles.primary_title
        lines.append(f"[cyan]Primary title:[/cyan] {primary.emoji} {primary.title}")
    else:
        lines.append(
            f"[yellow]Not eligible for titles[/yellow] "
            f"({orchestrator.config.titles.min_games} games required)"
        )
    if player_achievements:
        lines.append(f"[cyan]Achievement levels:[/cyan] {player_achievements.total_unlocked}")
    console.print(
        Panel("\n".join(lines), title=f"[bold blue]{metric_set.player_name}[/bold blue]", expand=False)
    )

    percentiles = player_titles.percentiles if player_titles else {}
    table = Table(title="Metrics")
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Percentile", justify="right")
    table.add_column("Category")
    for key, value in metric_set.stat_values().items():
        if value is None:
            continue
        classified = percentiles.get(key)
        table.add_row(
            key,
            f"{value:.2f}",
            f"{classified.percentile:.0f}" if classified else "-",
            classified.category.value if classified else "-",
        )
    console.print(table)

    if player_titles and player_titles.titles:
        titles_table = Table(title="Matching Titles")
        titles_table.add_column("Title", style="green")
        titles_table.add_column("Type", style="magenta")
        titles_table.add_column("Owner")
        for claim in player_titles.titles:
            titles_table.add_row(
                f"{claim.emoji} {claim.title}", claim.type, claim.primary_owner or "-"
            )
        console.print(titles_table)


@app.command()
def cache(
    clear: bool = typer.Option(False, "--clear", help="Delete the cache file"),
    output_dir: Optional[Path] = OutputDirOption,
) -> None:
    """
    Show the incremental cache snapshots, or clear them.
    """
    orchestrator = StatsOrchestrator(_run_config(None, output_dir, False))
    incremental = orchestrator.cache

    if clear:
        if incremental.clear():
            console.print(f"[green]Cleared[/green] {incremental.path}")
        else:
            console.print(f"[yellow]No cache at[/yellow] {incremental.path}")
        return

    state = incremental.load()
    if not state.slices:
        console.print(f"[yellow]Cache is empty:[/yellow] {incremental.path}")
        return

    table = Table(title=f"Cache ({incremental.path})")
    table.add_column("Slice", style="cyan")
    table.add_column("Games", justify="right")
    table.add_column("Players", justify="right")
    table.add_column("Settings")
    table.add_column("Updated")
    for slice_name, snapshot in sorted(state.slices.items()):
        current = snapshot.settings_hash == incremental.settings_hash
        table.add_row(
            slice_name,
            str(snapshot.total_games),
            str(len(snapshot.totals)),
            "[green]current[/green]" if current else "[yellow]stale[/yellow]",
            snapshot.updated_at or "-",
        )
    console.print(table)


@app.command()
def config(
    path: Path = typer.Argument(Path("lycanstats.yaml"), help="Where to write the config file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """
    Write a default configuration file.
    """
    if path.exists() and not force:
        console.print(f"[red]Error:[/red] {path} already exists (use --force)")
        raise typer.Exit(1)
    try:
        generate_default_config(path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Wrote default config to[/green] {path}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
