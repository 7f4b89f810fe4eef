"""
Holding list utilities.

Provides deduplication of the user's holding list before a refresh cycle.
"""

import logging

from fundman.models import Holding

logger = logging.getLogger(__name__)


def deduplicate_holdings(holdings: list[Holding]) -> list[Holding]:
    """
    Collapse a holding list to one entry per identifier.

    When an identifier appears more than once the last occurrence wins,
    but it keeps the position of the first occurrence.

    Args:
        holdings: Holdings in input order

    Returns:
        Deduplicated holdings
    """
    by_identifier: dict[str, Holding] = {}
    for holding in holdings:
        by_identifier[holding.identifier] = holding

    duplicates = len(holdings) - len(by_identifier)
    if duplicates:
        logger.debug("Collapsed %d duplicate holding(s)", duplicates)

    return list(by_identifier.values())


def get_portfolio_identifiers(holdings: list[Holding]) -> list[str]:
    """
    Get the distinct fund codes in a holding list, in first-seen order.

    Args:
        holdings: List of holdings

    Returns:
        Unique identifiers
    """
    return [holding.identifier for holding in deduplicate_holdings(holdings)]
