"""
JD Finance fund valuation provider.

Uses the public fund valuation endpoint
(http://dp.jr.jd.com/service/fundValuation/{code}.do), which returns a
JSON array whose first element holds the estimated net value, the
previous net value and the intraday estimate samples.
"""

import decimal
from decimal import Decimal
from typing import Any, Optional

import requests

from fundman.models import ValuationRecord
from fundman.data.providers.base import (
    DataProviderError,
    MalformedRecordError,
    ValuationProvider,
)


DEFAULT_BASE_URL = "http://dp.jr.jd.com/service/fundValuation"


class JDValuationProvider(ValuationProvider):
    """
    Valuation provider backed by the JD Finance HTTP JSON API.

    Each call performs exactly one GET request; retrying is left to
    ValuationFetcher.
    """

    VALUATION_ENDPOINT = "{base}/{code}.do"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the provider.

        Args:
            base_url: Endpoint prefix, the fund code is appended as ``/{code}.do``
            timeout: Per-request timeout in seconds
            session: Optional requests session (a plain requests.get is used otherwise)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session

    @property
    def name(self) -> str:
        return "JD Finance"

    def get_valuation(self, identifier: str) -> ValuationRecord:
        """
        Fetch and parse the valuation for one fund.

        Raises:
            DataProviderError: On transport errors or a non-200 status
            MalformedRecordError: If the payload cannot be parsed
        """
        url = self.VALUATION_ENDPOINT.format(base=self._base_url, code=identifier)
        getter = self._session.get if self._session is not None else requests.get

        try:
            response = getter(url, timeout=self._timeout)
        except requests.exceptions.Timeout:
            raise DataProviderError(f"Request timeout fetching {identifier}")
        except requests.exceptions.RequestException as e:
            raise DataProviderError(f"Request failed for {identifier}: {e}")

        if response.status_code != 200:
            raise DataProviderError(
                f"Unexpected status {response.status_code} fetching {identifier}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedRecordError(f"Invalid JSON response for {identifier}: {e}")

        return parse_valuation_record(payload, identifier)


def parse_valuation_record(payload: Any, identifier: str) -> ValuationRecord:
    """
    Convert a raw valuation payload into a ValuationRecord.

    The payload is either the JSON array returned by the endpoint or a
    single record mapping.

    Args:
        payload: Decoded JSON
        identifier: Fund code that was requested

    Returns:
        ValuationRecord

    Raises:
        MalformedRecordError: If required fields are missing or invalid
    """
    if isinstance(payload, list):
        if not payload:
            raise MalformedRecordError(f"Empty valuation response for {identifier}")
        payload = payload[0]

    if not isinstance(payload, dict):
        raise MalformedRecordError(f"Unexpected valuation payload for {identifier}")

    previous = _to_decimal(payload.get("fundNav"))
    if previous is None:
        raise MalformedRecordError(f"Missing previous net value (fundNav) for {identifier}")

    # An empty or zero currentNav means the provider has no intraday estimate
    current = _to_decimal(payload.get("currentNav")) or None

    rating = _to_decimal(payload.get("currentRating")) or Decimal("0")

    data = payload.get("data") or []
    if not isinstance(data, list):
        raise MalformedRecordError(f"Intraday samples for {identifier} must be a list, got {data!r}")

    samples = []
    for item in data:
        try:
            timestamp, flag, value = item[0], item[1], item[2]
            samples.append((timestamp, flag, float(value) if value is not None else None))
        except (IndexError, KeyError, TypeError, ValueError):
            raise MalformedRecordError(f"Invalid intraday sample for {identifier}: {item!r}")

    return ValuationRecord(
        identifier=str(payload.get("fundCode") or identifier),
        name=str(payload.get("fundShortName") or ""),
        current_rating=rating,
        current_net_value=current,
        previous_net_value=previous,
        samples=samples,
    )


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a numeric field, returning None for empty or non-numeric values."""
    if value is None or value == "":
        return None
    try:
        result = Decimal(str(value))
    except (ValueError, TypeError, decimal.InvalidOperation):
        return None
    if not result.is_finite():
        return None
    return result
