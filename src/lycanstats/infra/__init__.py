"""
lycanstats Infrastructure - System infrastructure components.

This module contains:
- cache: Incremental per-slice metric snapshots with atomic persistence
"""

from lycanstats.infra.cache import CacheSnapshot, CacheState, IncrementalCache

__all__: list[str] = ["CacheSnapshot", "CacheState", "IncrementalCache"]
