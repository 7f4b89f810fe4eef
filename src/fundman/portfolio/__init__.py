"""
Portfolio module for fundman.

Provides holding deduplication, per-holding valuation and the
concurrent refresh cycle.
"""

from fundman.portfolio.holdings import (
    deduplicate_holdings,
    get_portfolio_identifiers,
)
from fundman.portfolio.valuation import (
    calculate_rate_of_return,
    summarize_results,
    value_holding,
)
from fundman.portfolio.refresh import RefreshCycle

__all__ = [
    "deduplicate_holdings",
    "get_portfolio_identifiers",
    "calculate_rate_of_return",
    "summarize_results",
    "value_holding",
    "RefreshCycle",
]
