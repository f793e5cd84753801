"""Tests for the typer command line interface."""

from __future__ import annotations

import json

import pandas as pd
import pytest
from conftest import win_rate_series
from typer.testing import CliRunner

from lycanstats import __version__
from lycanstats.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep config discovery away from the real home and working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    for var in ("LYCANSTATS_GAME_LOG", "LYCANSTATS_OUTPUT_DIR", "LYCANSTATS_CACHE_ENABLED"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def log_path(write_log):
    return write_log(win_rate_series("s", num_players=10, num_games=30))


def _args(log_path, *extra: str) -> list[str]:
    return [*extra, "--game-log", str(log_path), "--output-dir", str(log_path.parent / "out")]


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("titles", "achievements", "stats", "player", "cache", "config"):
            assert command in result.stdout


class TestTitlesCommand:
    def test_writes_report(self, log_path):
        result = runner.invoke(app, _args(log_path, "titles"))
        assert result.exit_code == 0, result.stdout
        assert "Primary Titles" in result.stdout
        assert (log_path.parent / "out" / "playerTitles.json").exists()
        assert not (log_path.parent / "out" / "playerAchievements.json").exists()

    def test_missing_log_exits_with_error(self, tmp_path):
        result = runner.invoke(app, ["titles", "-g", str(tmp_path / "missing.json"), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_undecodable_log_exits_with_error(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"GameStats": [{"MapName": "Ch\xe2teau"}]}')
        result = runner.invoke(app, ["titles", "-g", str(path), "-o", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Error" in result.stdout
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_no_cache(self, log_path):
        result = runner.invoke(app, _args(log_path, "titles", "--no-cache"))
        assert result.exit_code == 0
        assert not (log_path.parent / "out" / "playerStatsCache.json").exists()

    def test_config_file_option(self, log_path, tmp_path):
        config_path = tmp_path / "custom.yaml"
        config_path.write_text("titles:\n  min_games: 31\n", encoding="utf-8")
        result = runner.invoke(app, ["--config", str(config_path), *_args(log_path, "titles")])
        assert result.exit_code == 0
        report = json.loads((log_path.parent / "out" / "playerTitles.json").read_text(encoding="utf-8"))
        assert report["minGamesRequired"] == 31
        assert list(report["players"]) == ["id-s-filler"]


class TestAchievementsCommand:
    def test_writes_report(self, log_path):
        result = runner.invoke(app, _args(log_path, "achievements", "--top", "3"))
        assert result.exit_code == 0
        report = json.loads((log_path.parent / "out" / "playerAchievements.json").read_text(encoding="utf-8"))
        assert report["totalPlayers"] == 11


class TestStatsCommand:
    def test_csv_export(self, log_path, tmp_path):
        output = tmp_path / "metrics.csv"
        result = runner.invoke(app, _args(log_path, "stats", "--output", str(output)))
        assert result.exit_code == 0
        df = pd.read_csv(output)
        assert len(df) == 11
        assert "winRatePercentile" in df.columns

    def test_all_slice_json(self, log_path, tmp_path):
        output = tmp_path / "metrics.json"
        result = runner.invoke(app, _args(log_path, "stats", "-f", str(output), "--slice", "all"))
        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["totalPlayers"] == 11

    def test_unknown_slice(self, log_path, tmp_path):
        result = runner.invoke(app, _args(log_path, "stats", "-f", str(tmp_path / "m.csv"), "-s", "ranked"))
        assert result.exit_code == 1

    def test_unknown_format(self, log_path, tmp_path):
        result = runner.invoke(app, _args(log_path, "stats", "-f", str(tmp_path / "m.xml")))
        assert result.exit_code == 1
        assert "Unsupported" in result.stdout


class TestPlayerCommand:
    def test_by_name(self, log_path):
        result = runner.invoke(app, _args(log_path, "player", "P09"))
        assert result.exit_code == 0
        assert "p09" in result.stdout
        # Inspecting a player never writes reports
        assert not (log_path.parent / "out" / "playerTitles.json").exists()

    def test_unknown_player(self, log_path):
        result = runner.invoke(app, _args(log_path, "player", "nobody"))
        assert result.exit_code == 1


class TestCacheCommand:
    def test_show_and_clear(self, log_path):
        out = str(log_path.parent / "out")
        runner.invoke(app, _args(log_path, "titles"))

        shown = runner.invoke(app, ["cache", "--output-dir", out])
        assert shown.exit_code == 0
        assert "modded" in shown.stdout

        cleared = runner.invoke(app, ["cache", "--clear", "--output-dir", out])
        assert cleared.exit_code == 0
        assert "Cleared" in cleared.stdout
        assert not (log_path.parent / "out" / "playerStatsCache.json").exists()

    def test_empty(self, tmp_path):
        result = runner.invoke(app, ["cache", "--output-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "empty" in result.stdout


class TestConfigCommand:
    def test_writes_default(self, tmp_path):
        path = tmp_path / "lycanstats.yaml"
        result = runner.invoke(app, ["config", str(path)])
        assert result.exit_code == 0
        assert "min_games: 25" in path.read_text(encoding="utf-8")

    def test_refuses_overwrite(self, tmp_path):
        path = tmp_path / "existing.yaml"
        path.write_text("keep", encoding="utf-8")
        result = runner.invoke(app, ["config", str(path)])
        assert result.exit_code == 1
        assert path.read_text(encoding="utf-8") == "keep"

        forced = runner.invoke(app, ["config", str(path), "--force"])
        assert forced.exit_code == 0
