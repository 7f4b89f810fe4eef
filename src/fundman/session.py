"""
Session state shared by the scheduler and the display layer.

A Session is created once by the top-level driver. It hands out cycle
generation ids and applies finished cycles to the extremes tracker and
the chart cache. Cycles may overlap; a cycle that finishes after a newer
one has already been applied is discarded.
"""

import logging
from typing import Optional

from fundman.models import CycleOutcome, CycleSummary, HoldingResult
from fundman.analytics.extremes import ExtremesTracker
from fundman.charts.series import ChartSeriesCache

logger = logging.getLogger(__name__)


class Session:
    """Process-lifetime refresh state."""

    def __init__(self):
        self.extremes = ExtremesTracker()
        self.charts = ChartSeriesCache()
        self.summary: Optional[CycleSummary] = None
        self.results: list[HoldingResult] = []
        self._launched = 0
        self._applied = 0

    @property
    def applied_generation(self) -> int:
        return self._applied

    def next_generation(self) -> int:
        """Reserve the id for a cycle about to launch."""
        self._launched += 1
        return self._launched

    def apply(self, outcome: CycleOutcome) -> bool:
        """
        Apply a finished cycle if it is newer than the last applied one.

        Args:
            outcome: Result of a refresh cycle

        Returns:
            True if the outcome became the visible state
        """
        if outcome.generation <= self._applied:
            logger.info(
                "Dropping stale cycle %d (cycle %d already applied)",
                outcome.generation, self._applied,
            )
            return False

        self._applied = outcome.generation
        self.extremes.update(outcome.summary.today_income_total)
        self.charts.replace(outcome.results)
        self.summary = outcome.summary
        self.results = outcome.results
        return True
