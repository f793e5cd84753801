"""
lycanstats - Exceptions
"""

# ========================================================================
# Exceptions
# ========================================================================


class LycanStatsError(Exception):
    """Base exception for lycanstats failures."""

    pass


class GameLogError(LycanStatsError):
    """Raised when the game log cannot be loaded. Fatal for a run."""

    pass


class RuleTableError(LycanStatsError):
    """Raised when a rule table is malformed."""

    pass


class CacheError(LycanStatsError):
    """Raised when a cache snapshot cannot be used. Always recovered by a full recompute."""

    pass
