"""
Pytest fixtures for the fundman tests.

Provides sample holdings, provider payloads and a scriptable fake
valuation provider.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from fundman.models import Holding, ValuationRecord
from fundman.data.providers.base import DataProviderError, ValuationProvider


class FakeProvider(ValuationProvider):
    """
    In-memory provider.

    ``outcomes`` maps a fund code to either a ValuationRecord (returned on
    every call) or a list consumed one item per call, where exceptions are
    raised. Unknown codes raise DataProviderError.
    """

    def __init__(self, outcomes: dict):
        self.outcomes = outcomes
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    def get_valuation(self, identifier: str) -> ValuationRecord:
        self.calls.append(identifier)
        outcome = self.outcomes.get(identifier)
        if outcome is None:
            raise DataProviderError(f"unknown fund {identifier}")
        if isinstance(outcome, list):
            outcome = outcome.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_record(
    identifier: str,
    previous: str = "1.0000",
    current: str | None = "1.0100",
    rating: str = "1.00",
    values: list | None = None,
    name: str = "",
) -> ValuationRecord:
    """Build a ValuationRecord with optional intraday values."""
    samples = [(f"t{i}", 0, value) for i, value in enumerate(values or [])]
    return ValuationRecord(
        identifier=identifier,
        name=name,
        current_rating=Decimal(rating),
        current_net_value=Decimal(current) if current is not None else None,
        previous_net_value=Decimal(previous),
        samples=samples,
    )


@pytest.fixture
def sample_holdings() -> list[Holding]:
    """Three distinct holdings."""
    return [
        Holding(
            identifier="000001",
            display_name="Balanced Growth",
            unit_cost=Decimal("1.0000"),
            units_held=Decimal("1000"),
        ),
        Holding(
            identifier="110022",
            display_name="Consumer Select",
            unit_cost=Decimal("2.0000"),
            units_held=Decimal("500"),
        ),
        Holding(
            identifier="161725",
            display_name="Liquor Index",
            unit_cost=Decimal("0.5000"),
            units_held=Decimal("2000"),
        ),
    ]


@pytest.fixture
def fake_provider_factory():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def sample_jd_payload() -> list[dict]:
    """
    Sample valuation endpoint response.

    Format matches http://dp.jr.jd.com/service/fundValuation/{code}.do
    """
    return [
        {
            "fundCode": "000001",
            "fundShortName": "Balanced Growth",
            "currentRating": "1.25",
            "currentNav": "1.0125",
            "fundNav": "1.0000",
            "data": [
                ["2024-05-06 09:30:00", 0, 1.0010],
                ["2024-05-06 09:31:00", 0, 1.0040],
                ["2024-05-06 09:32:00", 0, None],
                ["2024-05-06 09:33:00", 0, 1.0125],
            ],
        }
    ]


@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_something(mock_http_response):
            response = mock_http_response(status_code=200, json_data=[...])
    """

    def _create_response(status_code: int = 200, json_data=None, json_error: Exception | None = None):
        mock_response = MagicMock()
        mock_response.status_code = status_code
        if json_error is not None:
            mock_response.json.side_effect = json_error
        else:
            mock_response.json.return_value = json_data if json_data is not None else []
        return mock_response

    return _create_response
