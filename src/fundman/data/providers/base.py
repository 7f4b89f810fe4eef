"""
Abstract base class for valuation providers.

Defines the interface that all valuation sources must implement,
so the refresh engine can run against any backend (or a test double).
"""

from abc import ABC, abstractmethod

from fundman.models import ValuationRecord


class DataProviderError(Exception):
    """Raised when a data provider encounters an error."""
    pass


class MalformedRecordError(DataProviderError):
    """Raised when a provider response cannot be turned into a ValuationRecord."""
    pass


class FetchError(DataProviderError):
    """
    Raised when a fund's fetch has exhausted its retry budget.

    Attributes:
        identifier: Fund code that could not be fetched
        attempts: Number of attempts made
    """

    def __init__(self, identifier: str, attempts: int, message: str):
        super().__init__(
            f"Failed to fetch valuation for {identifier} after {attempts} attempts: {message}"
        )
        self.identifier = identifier
        self.attempts = attempts
        self.reason = message


class ValuationProvider(ABC):
    """
    Abstract base class for fund valuation providers.

    Implementations return one ValuationRecord per fund code and raise
    DataProviderError (or a subclass) on any failure.
    """

    @abstractmethod
    def get_valuation(self, identifier: str) -> ValuationRecord:
        """
        Fetch the current valuation for a fund.

        Args:
            identifier: Fund code

        Returns:
            Parsed ValuationRecord

        Raises:
            DataProviderError: If the valuation cannot be fetched or parsed
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this provider."""
        pass
