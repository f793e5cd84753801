"""
lycanstats Pipeline - Batch orchestration.

This module handles the complete run:
- Game log loading and slicing
- Cache-assisted aggregation
- Titles and achievements
- Report persistence
"""

from lycanstats.pipeline.orchestrator import RunResult, StatsOrchestrator, run_pipeline

__all__ = ["RunResult", "StatsOrchestrator", "run_pipeline"]
