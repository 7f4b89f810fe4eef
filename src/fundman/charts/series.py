"""
Per-holding chart series cache with an identifier-keyed selection.

The cache is replaced wholesale after each applied cycle. The selection
is stored as a fund identifier so it survives the result list shrinking
or being reordered between cycles.
"""

from dataclasses import dataclass, field
from typing import Optional

from fundman.models import HoldingResult
from fundman.charts.time_axis import build_time_axis


@dataclass
class ChartSeries:
    """
    Data for one holding's intraday line chart.

    Attributes:
        identifier: Fund code
        title: Chart legend, e.g. ``"Fund(000001)"``
        x_axis: Time labels
        y_values: Intraday values
        min_y: Lowest value, used as the chart's lower bound
    """
    identifier: str
    title: str
    x_axis: list[str] = field(default_factory=list)
    y_values: list[float] = field(default_factory=list)
    min_y: Optional[float] = None

    @classmethod
    def from_result(cls, result: HoldingResult) -> "ChartSeries":
        return cls(
            identifier=result.identifier,
            title=result.title,
            x_axis=build_time_axis(),
            y_values=list(result.intraday_series),
            min_y=result.min_series_value,
        )


class ChartSeriesCache:
    """Latest chart series, in result order, plus the current selection."""

    def __init__(self):
        self.series: list[ChartSeries] = []
        self._selected: Optional[str] = None
        self._cleared = False

    def replace(self, results: list[HoldingResult]) -> None:
        """Swap in the series of a freshly applied cycle."""
        self.series = [ChartSeries.from_result(result) for result in results]

    def select(self, index: int) -> None:
        """
        Select by position in the current series list.

        An out-of-range index leaves nothing selected until the next
        valid selection.
        """
        if 0 <= index < len(self.series):
            self._selected = self.series[index].identifier
            self._cleared = False
        else:
            self._selected = None
            self._cleared = True

    def select_identifier(self, identifier: Optional[str]) -> None:
        self._selected = identifier
        self._cleared = identifier is None

    @property
    def selected_identifier(self) -> Optional[str]:
        return self._selected

    @property
    def selected_index(self) -> Optional[int]:
        """Resolve the selection against the current series list."""
        if not self.series or self._cleared:
            return None
        for index, series in enumerate(self.series):
            if series.identifier == self._selected:
                return index
        return 0

    def current_series(self) -> Optional[ChartSeries]:
        """
        Series to display, or None when there is nothing to show.

        Falls back to the first series when the selected fund is absent
        from the latest cycle.
        """
        index = self.selected_index
        if index is None:
            return None
        return self.series[index]
