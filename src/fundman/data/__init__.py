"""
Data access for fundman.

Contains the valuation providers and the retrying fetcher used by the
refresh engine.
"""

from fundman.data.fetcher import DEFAULT_MAX_ATTEMPTS, ValuationFetcher
from fundman.data.providers import (
    DataProviderError,
    FetchError,
    JDValuationProvider,
    MalformedRecordError,
    ValuationProvider,
)

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "ValuationFetcher",
    "DataProviderError",
    "FetchError",
    "JDValuationProvider",
    "MalformedRecordError",
    "ValuationProvider",
]
