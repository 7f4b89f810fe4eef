"""
Core data models for fundman.

This module defines the data structures shared by the refresh engine:
input holdings, parsed valuation records, per-holding results and the
portfolio-level cycle summary. Monetary and unit quantities use Decimal;
intraday chart samples are plain floats.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


@dataclass
class Holding:
    """
    A fund position the user reports owning.

    Attributes:
        identifier: Fund code used to query the valuation provider
        display_name: Human readable name (may be empty)
        unit_cost: Per-unit cost basis
        units_held: Number of units held
        acquired_at: When the position was opened (optional)
    """
    identifier: str
    display_name: str
    unit_cost: Decimal
    units_held: Decimal
    acquired_at: Optional[datetime] = None

    @property
    def investment(self) -> Decimal:
        """Total cost basis (units_held * unit_cost)."""
        return self.units_held * self.unit_cost


@dataclass
class ValuationRecord:
    """
    Valuation data returned by a provider for a single fund.

    Attributes:
        identifier: Fund code the record belongs to
        name: Provider's short name for the fund
        current_rating: Estimated change today, in percent
        current_net_value: Intraday estimated net value (None outside trading)
        previous_net_value: Last published net value
        samples: Raw intraday samples as (timestamp, flag, value-or-None)
    """
    identifier: str
    name: str
    current_rating: Decimal
    current_net_value: Optional[Decimal]
    previous_net_value: Decimal
    samples: list[tuple[Any, Any, Optional[float]]] = field(default_factory=list)

    @property
    def current_value(self) -> Decimal:
        """Intraday value, falling back to the previous net value."""
        if self.current_net_value is not None:
            return self.current_net_value
        return self.previous_net_value


@dataclass
class HoldingResult:
    """
    Derived metrics for one successfully fetched holding.

    Attributes:
        identifier: Fund code
        display_name: Name shown to the user
        units_held: Number of units held
        unit_cost: Per-unit cost basis
        investment: units_held * unit_cost
        current_income_rate: Provider's estimated change today (%)
        total_income: Gain/loss against cost basis
        total_rate_of_return: total gain in percent, None when cost is zero
        today_income: Gain/loss since the previous net value
        intraday_series: Intraday sample values with gaps removed
        min_series_value: Lowest intraday value, None when no samples
    """
    identifier: str
    display_name: str
    units_held: Decimal
    unit_cost: Decimal
    investment: Decimal
    current_income_rate: Decimal
    total_income: Decimal
    total_rate_of_return: Optional[Decimal]
    today_income: Decimal
    intraday_series: list[float] = field(default_factory=list)
    min_series_value: Optional[float] = None

    @property
    def title(self) -> str:
        """Label used for tables and charts, e.g. ``"Fund(000001)"``."""
        return f"{self.display_name}({self.identifier})"


@dataclass
class ErrorInfo:
    """
    The most recent fetch failure surfaced for display.

    Attributes:
        identifier: Fund code whose fetch failed
        message: Error text
        attempts: Number of attempts made before giving up
        occurred_at: When the failure was recorded
    """
    identifier: str
    message: str
    attempts: int
    occurred_at: datetime = field(default_factory=datetime.now)


@dataclass
class CycleSummary:
    """
    Portfolio-level totals for one refresh cycle.

    Totals only include holdings that were fetched successfully in
    this cycle.
    """
    today_income_total: Decimal = Decimal("0")
    total_income_total: Decimal = Decimal("0")
    investment_total: Decimal = Decimal("0")
    is_trading_window_active: bool = False
    last_error: Optional[ErrorInfo] = None
    generation: int = 0
    holding_count: int = 0
    failed_count: int = 0
    completed_at: datetime = field(default_factory=datetime.now)

    @property
    def total_rate_of_return(self) -> Optional[Decimal]:
        """Portfolio return in percent, None when nothing is invested."""
        if self.investment_total == Decimal("0"):
            return None
        return self.total_income_total * Decimal("100") / self.investment_total


@dataclass
class CycleOutcome:
    """
    Everything produced by one refresh cycle.

    Attributes:
        generation: Launch order of the cycle
        results: Successful holding results in input order
        summary: Aggregated totals
    """
    generation: int
    results: list[HoldingResult]
    summary: CycleSummary
