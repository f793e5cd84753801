"""
Incremental Metric Cache

Provides:
- One snapshot per dataset slice (fingerprints, raw totals, derived metrics)
- Diffing the current game log against a snapshot
- Folding only new games into the cached totals
- A zero-work fast path when nothing changed
- Atomic persistence (temp file + rename)

Incremental output always equals a full recompute: totals are additive and
every metric is derived from totals, never patched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from lycanstats.analysis.metrics import (
    MetricAggregator,
    MetricSet,
    MetricTotals,
    metrics_settings_hash,
)
from lycanstats.core.errors import CacheError
from lycanstats.core.schemas import GameRecord
from lycanstats.core.utils import atomic_write_json, stored_number

logger = logging.getLogger(__name__)

# Bump when the snapshot layout or the folding rules change
CACHE_VERSION = 1


@dataclass
class CacheSnapshot:
    """Cached aggregation of one dataset slice."""

    total_games: int = 0
    fingerprints: dict[str, str] = field(default_factory=dict)
    last_order_key: str = ""
    settings_hash: str = ""
    totals: dict[str, MetricTotals] = field(default_factory=dict)
    metrics: dict[str, MetricSet] = field(default_factory=dict)
    updated_at: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.total_games == 0 and not self.fingerprints

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalGames": self.total_games,
            "fingerprints": self.fingerprints,
            "lastOrderKey": self.last_order_key,
            "settingsHash": self.settings_hash,
            "totals": {pid: totals.to_dict() for pid, totals in self.totals.items()},
            "metrics": {pid: metric_set.to_dict() for pid, metric_set in self.metrics.items()},
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheSnapshot:
        """
        Raises:
            KeyError, TypeError: if a section is missing or holds the wrong type
        """
        fingerprints = data["fingerprints"]
        if not isinstance(fingerprints, dict) or not all(
            isinstance(value, str) for value in fingerprints.values()
        ):
            raise TypeError("fingerprints must map game ids to strings")
        text_fields = {key: data.get(key) or "" for key in ("lastOrderKey", "settingsHash")}
        updated_at = data.get("updatedAt")
        if not all(isinstance(value, str) for value in text_fields.values()) or not isinstance(
            updated_at, (str, type(None))
        ):
            raise TypeError("lastOrderKey, settingsHash and updatedAt must be strings")
        return cls(
            total_games=stored_number(data["totalGames"], "totalGames", integral=True),
            fingerprints=dict(fingerprints),
            last_order_key=text_fields["lastOrderKey"],
            settings_hash=text_fields["settingsHash"],
            totals={pid: MetricTotals.from_dict(t) for pid, t in data["totals"].items()},
            metrics={pid: MetricSet.from_dict(m) for pid, m in data["metrics"].items()},
            updated_at=updated_at,
        )


@dataclass
class CacheState:
    """Everything stored in the cache file."""

    slices: dict[str, CacheSnapshot] = field(default_factory=dict)
    version: int = CACHE_VERSION

    def snapshot(self, slice_name: str) -> CacheSnapshot:
        return self.slices.get(slice_name) or CacheSnapshot()

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "slices": {name: snapshot.to_dict() for name, snapshot in self.slices.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> CacheState:
        """
        Raises:
            CacheError: if the data is not a snapshot file of the current version
        """
        if not isinstance(data, dict):
            raise CacheError("cache file is not an object")
        version = data.get("version")
        if version != CACHE_VERSION:
            raise CacheError(f"cache version {version} != {CACHE_VERSION}")
        try:
            slices = {
                name: CacheSnapshot.from_dict(snapshot)
                for name, snapshot in data.get("slices", {}).items()
            }
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CacheError(f"malformed snapshot: {e}") from e
        return cls(slices=slices)


@dataclass
class CacheDiff:
    new_games: list[GameRecord]
    unchanged_count: int
    full_recompute: bool
    reason: str = ""


@dataclass
class CacheRefresh:
    """Outcome of bringing one slice snapshot up to date."""

    snapshot: CacheSnapshot
    fast_path: bool = False
    full_recompute: bool = False
    rederived: bool = False
    new_games: int = 0
    reason: str = ""

    @property
    def metrics(self) -> dict[str, MetricSet]:
        return self.snapshot.metrics


class IncrementalCache:
    """
    File-backed cache of per-slice aggregation snapshots.

    Usage:
        cache = IncrementalCache(path, MetricAggregator(config.metrics))
        state = cache.load()
        refresh = cache.refresh(state.snapshot("modded"), games)
        state.slices["modded"] = refresh.snapshot
        cache.save(state)
    """

    def __init__(self, path: Path, aggregator: MetricAggregator | None = None):
        self.path = Path(path)
        self.aggregator = aggregator or MetricAggregator()
        self.settings_hash = metrics_settings_hash(self.aggregator.config)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> CacheState:
        """Read the cache file; anything unusable yields an empty state."""
        if not self.path.exists():
            logger.info(f"No cache at {self.path}, starting from scratch")
            return CacheState()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            state = CacheState.from_dict(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, CacheError) as e:
            logger.warning(f"Ignoring unusable cache {self.path}: {e}")
            return CacheState()
        logger.debug(f"Loaded cache with slices {sorted(state.slices)}")
        return state

    def save(self, state: CacheState) -> None:
        atomic_write_json(self.path, state.to_dict(), indent=None)
        logger.info(f"Saved cache to {self.path}")

    def clear(self) -> bool:
        """Delete the cache file. Returns whether there was one."""
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info(f"Cleared cache {self.path}")
        return True

    # ------------------------------------------------------------------
    # Diff / update
    # ------------------------------------------------------------------

    def diff(self, games: list[GameRecord], snapshot: CacheSnapshot) -> CacheDiff:
        if snapshot.is_empty:
            return CacheDiff(list(games), 0, True, "empty snapshot")

        current = {game.id: game.fingerprint for game in games}
        for game_id, fingerprint in snapshot.fingerprints.items():
            if game_id not in current:
                return CacheDiff(list(games), 0, True, f"game {game_id} disappeared")
            if current[game_id] != fingerprint:
                return CacheDiff(list(games), 0, True, f"game {game_id} changed")

        new_games = sorted(
            (game for game in games if game.id not in snapshot.fingerprints),
            key=lambda game: game.order_key,
        )
        if new_games and new_games[0].order_key <= snapshot.last_order_key:
            return CacheDiff(
                list(games), 0, True, f"game {new_games[0].id} is older than the snapshot"
            )
        return CacheDiff(new_games, len(snapshot.fingerprints), False)

    def rebuild(self, games: list[GameRecord]) -> CacheSnapshot:
        """Full recompute of a slice."""
        return self.update(CacheSnapshot(), games)

    def update(self, snapshot: CacheSnapshot, new_games: list[GameRecord]) -> CacheSnapshot:
        """Fold new games into the snapshot totals and re-derive every metric set."""
        totals = self.aggregator.fold(snapshot.totals, new_games)
        fingerprints = dict(snapshot.fingerprints)
        last_order_key = snapshot.last_order_key
        for game in new_games:
            fingerprints[game.id] = game.fingerprint
            last_order_key = max(last_order_key, game.order_key)

        return CacheSnapshot(
            total_games=len(fingerprints),
            fingerprints=fingerprints,
            last_order_key=last_order_key,
            settings_hash=self.settings_hash,
            totals=totals,
            metrics=self.aggregator.derive_all(totals),
            updated_at=datetime.now(timezone.utc).isoformat(),
        )

    def rederive(self, snapshot: CacheSnapshot) -> CacheSnapshot:
        """Recompute metric sets from cached totals (settings changed, games did not)."""
        return CacheSnapshot(
            total_games=snapshot.total_games,
            fingerprints=dict(snapshot.fingerprints),
            last_order_key=snapshot.last_order_key,
            settings_hash=self.settings_hash,
            totals=snapshot.totals,
            metrics=self.aggregator.derive_all(snapshot.totals),
            updated_at=datetime.now(timezone.utc).isoformat(),
        )

    def refresh(self, snapshot: CacheSnapshot, games: list[GameRecord]) -> CacheRefresh:
        """Bring a slice snapshot up to date with ``games`` doing as little work as possible."""
        diff = self.diff(games, snapshot)

        if diff.full_recompute:
            logger.info(f"Full recompute of {len(games)} games ({diff.reason})")
            return CacheRefresh(
                snapshot=self.rebuild(games),
                full_recompute=True,
                new_games=len(games),
                reason=diff.reason,
            )

        if not diff.new_games:
            if snapshot.settings_hash == self.settings_hash:
                logger.info(f"Cache up to date ({diff.unchanged_count} games), fast path")
                return CacheRefresh(snapshot=snapshot, fast_path=True, reason="no new games")
            logger.info("Metric settings changed, re-deriving from cached totals")
            return CacheRefresh(
                snapshot=self.rederive(snapshot), rederived=True, reason="settings changed"
            )

        logger.info(
            f"Folding {len(diff.new_games)} new games into {diff.unchanged_count} cached games"
        )
        return CacheRefresh(
            snapshot=self.update(snapshot, diff.new_games),
            new_games=len(diff.new_games),
            reason="new games",
        )
