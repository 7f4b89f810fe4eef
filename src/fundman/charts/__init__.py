"""
Chart data for fundman.

Provides the fixed intraday time axis and the per-holding series cache.
"""

from fundman.charts.time_axis import SESSION_MINUTES, build_time_axis
from fundman.charts.series import ChartSeries, ChartSeriesCache

__all__ = [
    "SESSION_MINUTES",
    "build_time_axis",
    "ChartSeries",
    "ChartSeriesCache",
]
