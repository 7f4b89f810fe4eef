"""
Valuation providers.

Provides a pluggable interface for fetching fund valuation estimates.
"""

from fundman.data.providers.base import (
    DataProviderError,
    FetchError,
    MalformedRecordError,
    ValuationProvider,
)
from fundman.data.providers.jd_provider import (
    DEFAULT_BASE_URL,
    JDValuationProvider,
    parse_valuation_record,
)

__all__ = [
    "DataProviderError",
    "FetchError",
    "MalformedRecordError",
    "ValuationProvider",
    "DEFAULT_BASE_URL",
    "JDValuationProvider",
    "parse_valuation_record",
]
