"""Tests for metric table and report export."""

from __future__ import annotations

import io
import json

import pandas as pd
import pytest

from lycanstats.analysis.metrics import MetricSet
from lycanstats.analysis.percentiles import PercentileResult
from lycanstats.core.constants import PercentileCategory
from lycanstats.export import (
    export_metrics,
    export_metrics_to_csv,
    export_to_json,
    flatten_dict,
    metrics_dataframe,
)


@pytest.fixture
def metric_sets():
    return {
        "b": MetricSet(player_id="b", player_name="Bob", games=12, camp_games={"loup": 12}, win_rate=25.0),
        "a": MetricSet(
            player_id="a",
            player_name="Alice",
            games=30,
            camp_games={"villageois": 20, "loup": 10},
            win_rate=60.0,
            talking_per_60min=42.5,
        ),
    }


@pytest.fixture
def percentiles():
    return {"a": {"winRate": PercentileResult(value=60.0, percentile=50.0, category=PercentileCategory.AVERAGE)}}


class TestFlatten:
    def test_nested(self):
        assert flatten_dict({"a": {"b": 1, "c": {"d": 2}}, "e": 3}) == {"a_b": 1, "a_c_d": 2, "e": 3}


class TestDataFrame:
    def test_one_row_per_player_sorted(self, metric_sets):
        df = metrics_dataframe(metric_sets)
        assert list(df["playerId"]) == ["a", "b"]
        assert df.loc[0, "campGames_villageois"] == 20
        assert df.loc[0, "winRate"] == 60.0

    def test_missing_values_stay_empty(self, metric_sets):
        df = metrics_dataframe(metric_sets)
        assert pd.isna(df.loc[1, "talkingPer60Min"])

    def test_percentile_columns(self, metric_sets, percentiles):
        df = metrics_dataframe(metric_sets, percentiles)
        assert df.loc[0, "winRatePercentile"] == 50.0
        assert pd.isna(df.loc[1, "winRatePercentile"])

    def test_empty(self):
        df = metrics_dataframe({})
        assert df.empty
        assert "winRate" in df.columns


class TestCsv:
    def test_csv_string(self, metric_sets):
        csv_str = export_metrics_to_csv(metric_sets)
        df = pd.read_csv(io.StringIO(csv_str))
        assert list(df["playerName"]) == ["Alice", "Bob"]

    def test_delimiter_and_file(self, metric_sets, tmp_path):
        path = tmp_path / "nested" / "metrics.csv"
        export_metrics_to_csv(metric_sets, path, delimiter=";")
        df = pd.read_csv(path, sep=";")
        assert len(df) == 2

    def test_empty_is_empty_string(self):
        assert export_metrics_to_csv({}) == ""


class TestJson:
    def test_metadata(self, tmp_path):
        path = tmp_path / "out.json"
        text = export_to_json({"x": 1}, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["_metadata"]["format"] == "lycanstats_json"
        assert data["x"] == 1
        assert json.loads(text)["x"] == 1

    def test_without_metadata(self):
        assert json.loads(export_to_json({"x": 1}, include_metadata=False)) == {"x": 1}


class TestExportMetrics:
    def test_format_from_extension(self, metric_sets, percentiles, tmp_path):
        path = tmp_path / "metrics.json"
        export_metrics(metric_sets, path, percentiles=percentiles)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["totalPlayers"] == 2
        assert data["players"]["a"]["stats"]["winRate"] == 60.0
        assert data["players"]["a"]["percentiles"]["winRate"]["percentile"] == 50.0
        assert "percentiles" not in data["players"]["b"]

    def test_explicit_format(self, metric_sets, tmp_path):
        path = tmp_path / "metrics.txt"
        export_metrics(metric_sets, path, format="csv")
        assert path.read_text(encoding="utf-8").startswith("playerId,")

    def test_unknown_format(self, metric_sets, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            export_metrics(metric_sets, tmp_path / "metrics.xml")
