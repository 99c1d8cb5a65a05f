"""
Financial data sources.

Each source implements ``lookup(ticker) -> StockRecord`` and raises
``TickerNotFound`` when it has nothing for the ticker. The screening
service depends on that capability only, never on a concrete provider.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

import pandas as pd
import requests

from halal_screener.config import (
    ALPHA_VANTAGE_API_KEY,
    ALPHA_VANTAGE_BASE_URL,
    ALPHA_VANTAGE_TIMEOUT,
    BOYCOTT_LIST_JSON,
    HARAM_INDUSTRY_KEYWORDS,
    HARAM_SECTOR_KEYWORDS,
    MOCK_FUNDAMENTALS_CSV,
    NON_HALAL_REVENUE_ESTIMATE_HALAL,
    NON_HALAL_REVENUE_ESTIMATE_HARAM,
    setup_logger,
)
from halal_screener.exceptions import DataSourceError, InvalidMetrics, TickerNotFound
from halal_screener.models import BoycottInfo, FinancialMetrics, StockRecord

logger = setup_logger(__name__)

_FUNDAMENTAL_COLUMNS = [
    "ticker",
    "name",
    "sector",
    "industry",
    "current_price",
    "market_cap",
    "total_debt",
    "cash_and_equivalents",
    "total_revenue",
    "non_halal_revenue",
    "is_halal_business",
]


class DataSource(Protocol):
    name: str

    def lookup(self, ticker: str) -> StockRecord:
        ...


def normalize_ticker(ticker: str) -> str:
    return ticker.strip().upper()


def load_boycott_list(path: str | Path = BOYCOTT_LIST_JSON) -> dict[str, BoycottInfo]:
    """Load ``{TICKER: {is_boycotted, reasons, sources}}`` from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return {
        normalize_ticker(ticker): BoycottInfo(
            is_boycotted=bool(entry.get("is_boycotted", False)),
            reasons=tuple(entry.get("reasons", ())),
            sources=tuple(entry.get("sources", ())),
        )
        for ticker, entry in raw.items()
    }


_FLAG_VALUES = {"true": True, "false": False}


def _parse_flag(name: str, value) -> bool:
    """Strict boolean parse of a CSV cell; blanks and unknown words are rejected."""
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _FLAG_VALUES:
            return _FLAG_VALUES[word]
    elif pd.api.types.is_bool(value):
        return bool(value)
    raise InvalidMetrics(f"{name} must be true or false, got {value!r}")


def _optional_float(value) -> float | None:
    if value is None or pd.isna(value):
        return None
    return float(value)


# ---------------------------------------------------------------------------
# Mock table
# ---------------------------------------------------------------------------

class MockDataSource:
    """Serves the bundled demonstration fundamentals."""

    name = "mock_data"

    def __init__(
        self,
        fundamentals_csv: str | Path = MOCK_FUNDAMENTALS_CSV,
        boycott_list: dict[str, BoycottInfo] | None = None,
    ):
        df = pd.read_csv(
            fundamentals_csv,
            dtype={"ticker": str, "name": str, "sector": str, "industry": str},
            true_values=["true", "True", "TRUE"],
            false_values=["false", "False", "FALSE"],
        )
        missing = set(_FUNDAMENTAL_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(
                f"{fundamentals_csv}: missing columns {', '.join(sorted(missing))}"
            )
        df["ticker"] = df["ticker"].map(normalize_ticker)
        df = df.drop_duplicates(subset="ticker", keep="last")
        self._rows = df.set_index("ticker", drop=False)
        self._boycotts = load_boycott_list() if boycott_list is None else boycott_list
        logger.info("Loaded %d mock tickers from %s", len(self._rows), fundamentals_csv)

    @property
    def tickers(self) -> list[str]:
        return list(self._rows.index)

    def lookup(self, ticker: str) -> StockRecord:
        symbol = normalize_ticker(ticker)
        if symbol not in self._rows.index:
            raise TickerNotFound(symbol, self.name)
        row = self._rows.loc[symbol]

        metrics = FinancialMetrics(
            market_cap=float(row["market_cap"]),
            total_debt=float(row["total_debt"]),
            cash_and_equivalents=float(row["cash_and_equivalents"]),
            total_revenue=float(row["total_revenue"]),
            non_halal_revenue=float(row["non_halal_revenue"]),
            is_halal_business=_parse_flag("is_halal_business", row["is_halal_business"]),
            boycott_info=self._boycotts.get(symbol),
        )
        return StockRecord(
            ticker=symbol,
            name=str(row["name"]),
            sector=str(row["sector"]),
            industry=str(row["industry"]),
            current_price=_optional_float(row["current_price"]),
            metrics=metrics,
            source=self.name,
        )


# ---------------------------------------------------------------------------
# Alpha Vantage
# ---------------------------------------------------------------------------

def is_halal_business(sector: str, industry: str) -> bool:
    """Basic business-activity screen on sector and industry names."""
    sector = (sector or "").lower()
    industry = (industry or "").lower()
    if any(word.lower() in sector for word in HARAM_SECTOR_KEYWORDS):
        return False
    if any(word.lower() in industry for word in HARAM_INDUSTRY_KEYWORDS):
        return False
    return True


def _av_float(value) -> float:
    """Parse an Alpha Vantage numeric string; ``"None"``/``"-"``/missing is 0."""
    if value in (None, "", "None", "-"):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _latest_report(payload: dict) -> dict:
    for node in ("annualReports", "quarterlyReports"):
        reports = payload.get(node)
        if reports:
            return reports[0]
    return {}


class AlphaVantageDataSource:
    """Live fundamentals from the Alpha Vantage HTTP API."""

    name = "alpha_vantage"

    def __init__(
        self,
        api_key: str,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        timeout: float = ALPHA_VANTAGE_TIMEOUT,
        session: requests.Session | None = None,
        boycott_list: dict[str, BoycottInfo] | None = None,
    ):
        if not api_key:
            raise ValueError("Alpha Vantage requires an API key")
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._boycotts = load_boycott_list() if boycott_list is None else boycott_list

    def _get(self, function: str, symbol: str) -> dict:
        params = {"function": function, "symbol": symbol, "apikey": self.api_key}
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise DataSourceError(f"Alpha Vantage {function} failed for {symbol}: {exc}") from exc

        # Throttling and errors come back as 200 with a message payload
        for key in ("Note", "Information", "Error Message"):
            if key in data:
                raise DataSourceError(f"Alpha Vantage {function} for {symbol}: {data[key]}")
        return data

    def lookup(self, ticker: str) -> StockRecord:
        symbol = normalize_ticker(ticker)

        overview = self._get("OVERVIEW", symbol)
        if not overview.get("Symbol"):
            raise TickerNotFound(symbol, self.name)

        quote = self._get("GLOBAL_QUOTE", symbol).get("Global Quote") or {}
        if not quote.get("05. price"):
            raise TickerNotFound(symbol, self.name)

        balance = _latest_report(self._get("BALANCE_SHEET", symbol))

        sector = overview.get("Sector") or "Unknown"
        industry = overview.get("Industry") or "Unknown"
        halal = is_halal_business(sector, industry)

        total_revenue = _av_float(overview.get("RevenueTTM"))
        fraction = NON_HALAL_REVENUE_ESTIMATE_HALAL if halal else NON_HALAL_REVENUE_ESTIMATE_HARAM

        metrics = FinancialMetrics(
            market_cap=_av_float(overview.get("MarketCapitalization")),
            total_debt=_av_float(balance.get("longTermDebt"))
            + _av_float(balance.get("shortTermDebt")),
            cash_and_equivalents=_av_float(
                balance.get("cashAndCashEquivalentsAtCarryingValue")
            ),
            total_revenue=total_revenue,
            non_halal_revenue=total_revenue * fraction,
            is_halal_business=halal,
            boycott_info=self._boycotts.get(symbol),
        )
        logger.debug("Fetched %s from Alpha Vantage", symbol)

        return StockRecord(
            ticker=symbol,
            name=overview.get("Name") or f"{symbol} Inc.",
            sector=sector,
            industry=industry,
            current_price=_av_float(quote.get("05. price")),
            pe_ratio=_av_float(overview.get("PERatio")) or None,
            dividend_yield=_av_float(overview.get("DividendYield")) or None,
            metrics=metrics,
            source=self.name,
        )


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

class FallbackDataSource:
    """Ask *primary* first; on a miss or provider failure ask *secondary*."""

    def __init__(self, primary: DataSource, secondary: DataSource):
        self.primary = primary
        self.secondary = secondary
        self.name = f"{primary.name}+{secondary.name}"

    def lookup(self, ticker: str) -> StockRecord:
        try:
            return self.primary.lookup(ticker)
        except (TickerNotFound, DataSourceError) as exc:
            logger.warning(
                "%s lookup failed for %s (%s); falling back to %s",
                self.primary.name,
                ticker,
                exc,
                self.secondary.name,
            )
        return self.secondary.lookup(ticker)


def default_data_source(api_key: str | None = ALPHA_VANTAGE_API_KEY) -> DataSource:
    """Live data with mock fallback when an API key is configured, else mock only."""
    mock = MockDataSource()
    if not api_key:
        logger.info("No Alpha Vantage API key configured; serving mock data only")
        return mock
    return FallbackDataSource(AlphaVantageDataSource(api_key), mock)
