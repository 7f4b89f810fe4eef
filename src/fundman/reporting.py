"""
Text and tabular output of refresh results.

Builds the summary block and holding table rows shown by the CLI (with
embedded colour tags), and exports results as a pandas DataFrame or CSV.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from fundman.models import CycleSummary, HoldingResult
from fundman.analytics.extremes import ExtremesTracker
from fundman.formatting import format_number


TABLE_HEADERS = ["Fund", "Position", "Today (est.)", "Total"]

RESULT_COLUMNS = [
    "identifier",
    "name",
    "units_held",
    "unit_cost",
    "investment",
    "current_rating",
    "today_income",
    "total_income",
    "total_rate_of_return",
    "samples",
]


def summary_lines(
    summary: CycleSummary,
    extremes: Optional[ExtremesTracker] = None,
) -> list[str]:
    """
    Render the portfolio summary block.

    Outside the trading window a single notice replaces the figures.
    """
    lines = []
    if summary.is_trading_window_active:
        low = high = None
        if extremes is not None and extremes.has_observations:
            low, high = extremes.minimum, extremes.maximum
        lines.extend([
            f"Total investment: {{yellow-fg}}{summary.investment_total:.2f}{{/}}",
            f"Today's estimated income: {format_number(summary.today_income_total, with_sign=True)}"
            f" Low: {format_number(low, with_sign=True, pad_char=' ')}"
            f" High: {format_number(high, with_sign=True, pad_char=' ')}",
            f"Total estimated income: {format_number(summary.total_income_total, with_sign=True)}",
            f"Total rate of return: {format_number(summary.total_rate_of_return, with_sign=True, percent=True)}",
            f"Last updated: {summary.completed_at:%Y-%m-%d %H:%M:%S}",
        ])
    else:
        lines.append("{red-fg}Outside trading hours, no intraday estimates available{/}")

    if summary.last_error is not None:
        lines.append(f"{{yellow-fg}}Last error: {summary.last_error.message}{{/}}")

    return lines


def table_row(result: HoldingResult) -> list[str]:
    """Render one holding as the four table columns."""
    position = (
        f"Units:{format_number(result.units_held, pad_char=' ', pad_length=8)},"
        f"Cost:{format_number(result.unit_cost, pad_char=' ')}, "
        f"Total: {format_number(result.investment, precision=0)}"
    )
    today = (
        f"{format_number(result.today_income, with_sign=True, pad_char=' ')}"
        f"({format_number(result.current_income_rate, with_sign=True, percent=True)})"
    )
    total = (
        f"{format_number(result.total_income, with_sign=True, pad_char=' ')}"
        f"({format_number(result.total_rate_of_return, with_sign=True, percent=True)})"
    )
    return [result.title, position, today, total]


def table_rows(results: list[HoldingResult]) -> list[list[str]]:
    return [table_row(result) for result in results]


def results_to_frame(results: list[HoldingResult]) -> pd.DataFrame:
    """
    Convert holding results to a DataFrame, one row per holding.

    Decimal values are converted to float; an undefined rate of return
    becomes NaN.
    """
    records = []
    for result in results:
        rate = result.total_rate_of_return
        records.append({
            "identifier": result.identifier,
            "name": result.display_name,
            "units_held": float(result.units_held),
            "unit_cost": float(result.unit_cost),
            "investment": float(result.investment),
            "current_rating": float(result.current_income_rate),
            "today_income": float(result.today_income),
            "total_income": float(result.total_income),
            "total_rate_of_return": float(rate) if rate is not None else float("nan"),
            "samples": len(result.intraday_series),
        })
    return pd.DataFrame(records, columns=RESULT_COLUMNS)


def save_results(results: list[HoldingResult], output_path: str | Path) -> Path:
    """
    Save holding results to a CSV file.

    Args:
        results: Holding results of one cycle
        output_path: Path for the CSV file

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    results_to_frame(results).to_csv(output_path, index=False)
    return output_path
