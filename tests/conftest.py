import pytest
import requests

from halal_screener.models import BoycottInfo, FinancialMetrics, StandardDefinition
from halal_screener.services.data_sources import MockDataSource
from halal_screener.services.standards import build_registry


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def standard():
    return StandardDefinition(
        key="standard",
        name="Standard",
        max_debt_ratio_percent=33,
        max_cash_ratio_percent=33,
        max_non_halal_revenue_percent=5,
    )


@pytest.fixture
def make_metrics():
    """Build metrics that pass every standard threshold unless overridden."""

    def _make(**overrides):
        fields = dict(
            market_cap=1_000.0,
            total_debt=100.0,
            cash_and_equivalents=100.0,
            total_revenue=1_000.0,
            non_halal_revenue=10.0,
            is_halal_business=True,
            boycott_info=None,
        )
        fields.update(overrides)
        return FinancialMetrics(**fields)

    return _make


@pytest.fixture
def boycotted():
    return BoycottInfo(
        is_boycotted=True,
        reasons=("Reason one", "Reason two"),
        sources=("Source A",),
    )


@pytest.fixture(scope="session")
def mock_source():
    return MockDataSource()


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``; answers by Alpha Vantage function."""

    def __init__(self, payloads=None, error=None, status_code=200):
        self.payloads = payloads or {}
        self.error = error
        self.status_code = status_code
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payloads.get(params["function"], {}), self.status_code)


@pytest.fixture
def fake_session():
    return FakeSession
