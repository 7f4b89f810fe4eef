"""
Bounded-retry wrapper around a valuation provider.

Every failed attempt (transport error, bad status, malformed payload) is
treated the same way and retried immediately until the attempt budget
is spent.
"""

import logging
from typing import Optional

import requests

from fundman.models import ValuationRecord
from fundman.data.providers.base import (
    DataProviderError,
    FetchError,
    ValuationProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class ValuationFetcher:
    """
    Fetch valuations with a fixed number of immediate retries.

    Args:
        provider: Underlying valuation provider
        max_attempts: Default attempt budget per fetch
    """

    def __init__(self, provider: ValuationProvider, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.provider = provider
        self.max_attempts = max_attempts

    def fetch(self, identifier: str, max_attempts: Optional[int] = None) -> ValuationRecord:
        """
        Fetch a valuation, retrying on failure.

        Args:
            identifier: Fund code
            max_attempts: Override for the attempt budget

        Returns:
            ValuationRecord from the first successful attempt

        Raises:
            FetchError: After max_attempts consecutive failures
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {attempts}")

        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                return self.provider.get_valuation(identifier)
            except (DataProviderError, requests.exceptions.RequestException) as e:
                last_error = e
                logger.debug(
                    "Attempt %d/%d for %s via %s failed: %s",
                    attempt, attempts, identifier, self.provider.name, e,
                )

        logger.warning("Giving up on %s after %d attempts: %s", identifier, attempts, last_error)
        raise FetchError(identifier, attempts, str(last_error)) from last_error
