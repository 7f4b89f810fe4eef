"""
Holding valuation and portfolio totals.

This module turns a provider ValuationRecord into per-holding income
figures and sums those figures into a CycleSummary.
"""

from decimal import Decimal
from typing import Optional

from fundman.models import (
    CycleSummary,
    ErrorInfo,
    Holding,
    HoldingResult,
    ValuationRecord,
)


def calculate_rate_of_return(
    current_value: Decimal,
    unit_cost: Decimal,
) -> Optional[Decimal]:
    """
    Calculate total return against cost basis, in percent.

    Args:
        current_value: Current net value per unit
        unit_cost: Cost basis per unit

    Returns:
        Return in percent (e.g. 5 for 5%), or None when unit_cost is zero
    """
    if unit_cost == Decimal("0"):
        return None
    return (current_value - unit_cost) * Decimal("100") / unit_cost


def extract_series(record: ValuationRecord) -> list[float]:
    """Intraday sample values with missing entries dropped."""
    return [value for _, _, value in record.samples if value is not None]


def value_holding(holding: Holding, record: ValuationRecord) -> HoldingResult:
    """
    Compute the derived metrics for one holding.

    Args:
        holding: The user's position
        record: Valuation fetched for the position

    Returns:
        HoldingResult
    """
    current_value = record.current_value
    previous_value = record.previous_net_value
    series = extract_series(record)

    return HoldingResult(
        identifier=holding.identifier,
        display_name=holding.display_name or record.name or holding.identifier,
        units_held=holding.units_held,
        unit_cost=holding.unit_cost,
        investment=holding.investment,
        current_income_rate=record.current_rating,
        total_income=(current_value - holding.unit_cost) * holding.units_held,
        total_rate_of_return=calculate_rate_of_return(current_value, holding.unit_cost),
        today_income=(current_value - previous_value) * holding.units_held,
        intraday_series=series,
        min_series_value=min(series) if series else None,
    )


def is_trading_window_active(results: list[HoldingResult]) -> bool:
    """True if any result carries intraday samples."""
    return any(result.intraday_series for result in results)


def summarize_results(
    results: list[HoldingResult],
    last_error: Optional[ErrorInfo] = None,
    generation: int = 0,
    holding_count: Optional[int] = None,
    failed_count: int = 0,
) -> CycleSummary:
    """
    Sum per-holding results into portfolio totals.

    Args:
        results: Successful results of one cycle
        last_error: Most recent fetch failure of the cycle
        generation: Cycle generation id
        holding_count: Number of holdings requested (defaults to len(results))
        failed_count: Number of holdings that failed

    Returns:
        CycleSummary
    """
    return CycleSummary(
        today_income_total=sum((r.today_income for r in results), Decimal("0")),
        total_income_total=sum((r.total_income for r in results), Decimal("0")),
        investment_total=sum((r.investment for r in results), Decimal("0")),
        is_trading_window_active=is_trading_window_active(results),
        last_error=last_error,
        generation=generation,
        holding_count=len(results) if holding_count is None else holding_count,
        failed_count=failed_count,
    )
