"""
Export Functionality for lycanstats

Provides export formats for per-player metrics and reports:
- JSON (reports, metric tables with an export metadata block)
- CSV (metric tables, one row per player, via pandas)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd

from lycanstats.analysis.metrics import MetricSet
from lycanstats.analysis.percentiles import PercentileResult
from lycanstats.core.utils import atomic_write_json

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv")


# ============================================================================
# Data Conversion Utilities
# ============================================================================


def flatten_dict(d: dict, parent_key: str = "", sep: str = "_") -> dict:
    """Flatten a nested dictionary."""
    items: list[tuple[str, Any]] = []
    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k
        if isinstance(v, dict):
            items.extend(flatten_dict(v, new_key, sep).items())
        else:
            items.append((new_key, v))
    return dict(items)


def metrics_dataframe(
    metric_sets: Mapping[str, MetricSet],
    percentiles: Mapping[str, Mapping[str, PercentileResult]] | None = None,
) -> pd.DataFrame:
    """
    One row per player: identity, game counts, every stat and (when given)
    every stat percentile. Missing values stay empty, never zero.
    """
    percentiles = percentiles or {}
    stat_keys = list(MetricSet.stat_fields())

    rows = []
    for player_id in sorted(metric_sets):
        metric_set = metric_sets[player_id]
        row: dict[str, Any] = {
            "playerId": metric_set.player_id,
            "playerName": metric_set.player_name,
            "games": metric_set.games,
        }
        row.update(flatten_dict({"campGames": metric_set.camp_games}))
        row.update(metric_set.stat_values())
        player_percentiles = percentiles.get(player_id, {})
        if percentiles:
            for key in stat_keys:
                result = player_percentiles.get(key)
                row[f"{key}Percentile"] = round(result.percentile, 2) if result else None
        rows.append(row)

    columns = ["playerId", "playerName", "games"]
    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=columns + stat_keys)
    return df


# ============================================================================
# JSON Export
# ============================================================================


def export_to_json(
    data: dict[str, Any],
    output_path: Path | None = None,
    indent: int = 2,
    include_metadata: bool = True,
) -> str:
    """
    Export a report or table to JSON.

    Args:
        data: JSON-serializable dictionary
        output_path: Optional path to write the file (atomically)
        indent: JSON indentation level
        include_metadata: Whether to prepend an export metadata block

    Returns:
        JSON string
    """
    export_data = dict(data)
    if include_metadata:
        export_data = {
            "_metadata": {
                "exported_at": datetime.now(timezone.utc).isoformat(),
                "format": "lycanstats_json",
                "version": "1.0",
            },
            **export_data,
        }

    if output_path:
        atomic_write_json(output_path, export_data, indent=indent)
        logger.info(f"Exported JSON to: {output_path}")

    return json.dumps(export_data, indent=indent, ensure_ascii=False)


# ============================================================================
# CSV Export
# ============================================================================


def export_metrics_to_csv(
    metric_sets: Mapping[str, MetricSet],
    output_path: Path | None = None,
    delimiter: str = ",",
    percentiles: Mapping[str, Mapping[str, PercentileResult]] | None = None,
) -> str:
    """
    Export player metrics to CSV format.

    Returns:
        CSV string (empty when there are no players)
    """
    if not metric_sets:
        return ""

    csv_str = metrics_dataframe(metric_sets, percentiles).to_csv(index=False, sep=delimiter)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(csv_str, encoding="utf-8")
        logger.info(f"Exported CSV to: {output_path}")

    return csv_str


# ============================================================================
# Unified Export Function
# ============================================================================


def export_metrics(
    metric_sets: Mapping[str, MetricSet],
    output_path: Path,
    format: str | None = None,
    percentiles: Mapping[str, Mapping[str, PercentileResult]] | None = None,
    indent: int = 2,
    delimiter: str = ",",
) -> None:
    """
    Export the per-player metric table.

    Format is detected from the file extension if not specified.
    """
    if format is None:
        format = output_path.suffix.lstrip(".").lower()

    if format == "json":
        percentiles = percentiles or {}
        players = {}
        for player_id, metric_set in sorted(metric_sets.items()):
            entry = metric_set.to_dict()
            if player_id in percentiles:
                entry["percentiles"] = {
                    key: result.to_dict() for key, result in percentiles[player_id].items()
                }
            players[player_id] = entry
        export_to_json({"totalPlayers": len(players), "players": players}, output_path, indent=indent)

    elif format == "csv":
        export_metrics_to_csv(metric_sets, output_path, delimiter=delimiter, percentiles=percentiles)

    else:
        raise ValueError(f"Unsupported export format: {format}")
