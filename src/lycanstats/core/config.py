"""
Configuration Management for lycanstats

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables
- Command line arguments

Configuration precedence (highest to lowest):
1. Command line arguments
2. Environment variables (LYCANSTATS_*)
3. Configuration file
4. Default values
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lycanstats.core.constants import (
    MIN_GAMES_FOR_ROLE_TITLES,
    MIN_GAMES_FOR_TITLES,
    PERCENTILE_THRESHOLDS,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class DataConfig:
    """Where the game log is read from and reports are written to."""

    game_log: str = "data/gameLog.json"
    output_dir: str = "data"


@dataclass
class MetricsConfig:
    """Minimum samples before a derived rate is reported (otherwise null)."""

    # Camp win rates / camp loot need at least this many games in the camp
    min_camp_games: dict[str, int] = field(
        default_factory=lambda: {"villageois": 6, "loup": 6, "solo": 4}
    )

    # Voting
    min_votes_for_accuracy: int = 10
    min_meetings_for_first_vote: int = 5
    early_vote_fraction: float = 0.33

    # Hunter accuracy needs this many games as Chasseur
    min_hunter_games: int = MIN_GAMES_FOR_ROLE_TITLES


@dataclass
class TitlesConfig:
    """Eligibility and classification settings for titles."""

    min_games: int = MIN_GAMES_FOR_TITLES
    min_games_for_role_titles: int = MIN_GAMES_FOR_ROLE_TITLES
    role_min_percentage: float = 12.0
    role_min_count: int = 5

    # Percentile cut points per category
    percentile_thresholds: dict[str, float] = field(
        default_factory=lambda: dict(PERCENTILE_THRESHOLDS)
    )

    # Camp share (%) needed for a camp assignment title
    camp_assignment_thresholds: dict[str, float] = field(
        default_factory=lambda: {"villageois": 75.0, "loup": 45.0, "solo": 20.0}
    )

    # Combination titles only go to claimants this close to the best fit
    narrowing_tolerance: float = 0.1

    # Optional YAML/JSON rule table replacing the built-in one
    rules_file: str | None = None


@dataclass
class CacheConfig:
    """Configuration for the incremental metrics cache."""

    enabled: bool = True
    # Defaults to <output_dir>/playerStatsCache.json
    path: str | None = None


@dataclass
class ExportConfig:
    """Configuration for report export."""

    json_indent: int = 2
    csv_delimiter: str = ","
    titles_file: str = "playerTitles.json"
    achievements_file: str = "playerAchievements.json"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class LycanStatsConfig:
    """Main configuration container."""

    data: DataConfig = field(default_factory=DataConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    titles: TitlesConfig = field(default_factory=TitlesConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Version of the config format
    config_version: str = "1.0"

    @property
    def cache_path(self) -> Path:
        if self.cache.path:
            return Path(self.cache.path)
        return Path(self.data.output_dir) / "playerStatsCache.json"


SECTIONS = ("data", "metrics", "titles", "cache", "export", "logging")


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    paths = []

    # Current directory
    paths.append(Path.cwd() / "lycanstats.yaml")
    paths.append(Path.cwd() / "lycanstats.toml")
    paths.append(Path.cwd() / "lycanstats.json")
    paths.append(Path.cwd() / ".lycanstats.yaml")

    # User home directory
    home = Path.home()
    paths.append(home / ".config" / "lycanstats" / "config.yaml")
    paths.append(home / ".config" / "lycanstats" / "config.toml")
    paths.append(home / ".lycanstats.yaml")

    # XDG config directory
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    paths.append(Path(xdg_config) / "lycanstats" / "config.yaml")

    return paths


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return load_yaml_config(path)
    elif suffix == ".toml":
        return load_toml_config(path)
    elif suffix == ".json":
        return load_json_config(path)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    env_mappings = {
        "LYCANSTATS_GAME_LOG": ("data", "game_log"),
        "LYCANSTATS_OUTPUT_DIR": ("data", "output_dir"),
        "LYCANSTATS_LOG_LEVEL": ("logging", "level"),
        "LYCANSTATS_LOG_FILE": ("logging", "file"),
        "LYCANSTATS_MIN_GAMES": ("titles", "min_games"),
        "LYCANSTATS_RULES_FILE": ("titles", "rules_file"),
        "LYCANSTATS_CACHE_ENABLED": ("cache", "enabled"),
        "LYCANSTATS_CACHE_PATH": ("cache", "path"),
    }

    for env_var, (section, key) in env_mappings.items():
        value: Any = os.environ.get(env_var)
        if value is not None:
            if section not in config:
                config[section] = {}

            # Type conversion
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            else:
                try:
                    value = float(value)
                except ValueError:
                    pass

            config[section][key] = value

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> LycanStatsConfig:
    """Convert a dictionary to LycanStatsConfig."""
    config = LycanStatsConfig()

    for section_name in SECTIONS:
        section_data = data.get(section_name)
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if not hasattr(section, key):
                logger.debug(f"Ignoring unknown config key: {section_name}.{key}")
                continue
            current = getattr(section, key)
            # Partial dict overrides keep the remaining defaults
            if isinstance(current, dict) and isinstance(value, dict):
                value = {**current, **value}
            setattr(section, key, value)

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> LycanStatsConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged LycanStatsConfig
    """
    config_data: dict[str, Any] = {}

    # Try to find and load a config file
    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    # Merge environment variables
    if include_env:
        env_config = load_env_config()
        config_data = merge_configs(config_data, env_config)

    return dict_to_config(config_data)


# ============================================================================
# Configuration Saving
# ============================================================================


def save_config(config: LycanStatsConfig, path: Path) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration to save
        path: Path to save to (format detected from extension; YAML or JSON)
    """
    data = config_to_dict(config)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    elif suffix == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    else:
        raise ValueError(f"Unknown config format: {suffix}")

    logger.info(f"Saved config to: {path}")


def config_to_dict(config: LycanStatsConfig) -> dict[str, Any]:
    """Convert LycanStatsConfig to a dictionary."""
    return asdict(config)


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: LycanStatsConfig | None = None


def get_config() -> LycanStatsConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: LycanStatsConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _global_config
    _global_config = None


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# lycanstats configuration

# Input / output locations
data:
  game_log: data/gameLog.json
  output_dir: data

# Minimum samples before a rate is reported
metrics:
  min_camp_games:
    villageois: 6
    loup: 6
    solo: 4
  min_votes_for_accuracy: 10
  min_meetings_for_first_vote: 5
  min_hunter_games: 10

# Title eligibility and percentile buckets
titles:
  min_games: 25
  min_games_for_role_titles: 10
  narrowing_tolerance: 0.1
  percentile_thresholds:
    EXTREME_HIGH: 85
    HIGH: 65
    ABOVE_AVERAGE: 55
    BELOW_AVERAGE: 45
    LOW: 35
    EXTREME_LOW: 15
  # rules_file: rules.yaml

# Incremental metrics cache
cache:
  enabled: true
  # path: data/playerStatsCache.json

# Export settings
export:
  json_indent: 2
  csv_delimiter: ","

# Logging settings
logging:
  level: INFO
  # file: /path/to/lycanstats.log
"""


def generate_default_config(path: Path) -> None:
    """Generate a default configuration file."""
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    else:
        config = LycanStatsConfig()
        save_config(config, path)

    logger.info(f"Generated default config at: {path}")
