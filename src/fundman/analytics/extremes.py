"""
Running extremes of the portfolio's today-income total.

The tracker lives for the whole process and only ever widens. Every
applied cycle is folded in, including cycles outside the trading window
whose total is zero.
"""

from decimal import Decimal


class ExtremesTracker:
    """Process-lifetime running minimum and maximum."""

    def __init__(self):
        self.minimum = Decimal("Infinity")
        self.maximum = Decimal("-Infinity")

    @property
    def has_observations(self) -> bool:
        return self.minimum.is_finite()

    def update(self, today_income_total: Decimal) -> None:
        """Fold one cycle's today-income total into the extremes."""
        self.minimum = min(self.minimum, today_income_total)
        self.maximum = max(self.maximum, today_income_total)
