import pytest
import requests

from halal_screener.exceptions import DataSourceError, InvalidMetrics, TickerNotFound
from halal_screener.services.data_sources import (
    AlphaVantageDataSource,
    FallbackDataSource,
    MockDataSource,
    default_data_source,
    is_halal_business,
    load_boycott_list,
)

ACME_PAYLOADS = {
    "OVERVIEW": {
        "Symbol": "ACME",
        "Name": "Acme Corp",
        "Sector": "TECHNOLOGY",
        "Industry": "SERVICES-PREPACKAGED SOFTWARE",
        "MarketCapitalization": "1000000000",
        "RevenueTTM": "500000000",
        "PERatio": "25.5",
        "DividendYield": "None",
    },
    "GLOBAL_QUOTE": {"Global Quote": {"01. symbol": "ACME", "05. price": "123.4500"}},
    "BALANCE_SHEET": {
        "annualReports": [
            {
                "longTermDebt": "100000000",
                "shortTermDebt": "50000000",
                "cashAndCashEquivalentsAtCarryingValue": "200000000",
            }
        ]
    },
}


# -- Mock table ----------------------------------------------------------------

def test_mock_source_ships_demo_tickers(mock_source):
    assert set(mock_source.tickers) == {
        "AAPL", "JPM", "TSLA", "MCD", "MSFT", "NVDA", "WMT", "UBER",
    }


def test_mock_lookup_normalizes_ticker(mock_source):
    record = mock_source.lookup(" aapl ")

    assert record.ticker == "AAPL"
    assert record.name == "Apple Inc."
    assert record.current_price == 175.43
    assert record.source == "mock_data"
    assert record.metrics.market_cap == 2.8e12
    assert record.metrics.is_halal_business is True
    assert record.metrics.boycott_info is None


def test_mock_lookup_reads_boolean_flag(mock_source):
    assert mock_source.lookup("JPM").metrics.is_halal_business is False


def test_mock_lookup_attaches_boycott_info(mock_source):
    info = mock_source.lookup("MSFT").metrics.boycott_info

    assert info.is_boycotted
    assert info.reasons[0] == "Cloud services contracts with Israeli military"
    assert info.sources == ("Tech Workers Coalition", "No Tech for Apartheid")


def test_mock_lookup_unknown_ticker(mock_source):
    with pytest.raises(TickerNotFound) as excinfo:
        mock_source.lookup("ZZZZ")
    assert excinfo.value.ticker == "ZZZZ"
    assert excinfo.value.source == "mock_data"


def test_mock_source_rejects_bad_rows(tmp_path):
    csv = tmp_path / "bad.csv"
    csv.write_text(
        "ticker,name,sector,industry,current_price,market_cap,total_debt,"
        "cash_and_equivalents,total_revenue,non_halal_revenue,is_halal_business\n"
        "BAD,Bad Co,Tech,Software,1.0,100,10,10,50,60,true\n"
    )
    source = MockDataSource(csv, boycott_list={})
    with pytest.raises(InvalidMetrics):
        source.lookup("BAD")


_HEADER = (
    "ticker,name,sector,industry,current_price,market_cap,total_debt,"
    "cash_and_equivalents,total_revenue,non_halal_revenue,is_halal_business\n"
)


@pytest.mark.parametrize("flag", ["", "no", "maybe"])
def test_mock_source_rejects_unclear_halal_flag(tmp_path, flag):
    csv = tmp_path / "flags.csv"
    csv.write_text(
        _HEADER
        + "OK,Okay Co,Tech,Software,1.0,100,1,1,50,1,true\n"
        + f"BNK,Bank,Finance,Banks,1.0,100,1,1,50,1,{flag}\n"
    )
    source = MockDataSource(csv, boycott_list={})

    assert source.lookup("OK").metrics.is_halal_business is True
    with pytest.raises(InvalidMetrics, match="is_halal_business"):
        source.lookup("BNK")


def test_mock_source_requires_columns(tmp_path):
    csv = tmp_path / "short.csv"
    csv.write_text("ticker,name\nX,X Co\n")
    with pytest.raises(ValueError, match="missing columns"):
        MockDataSource(csv, boycott_list={})


def test_load_boycott_list_uppercases_keys(tmp_path):
    path = tmp_path / "boycotts.json"
    path.write_text('{"abc": {"is_boycotted": true, "reasons": ["r"], "sources": []}}')

    boycotts = load_boycott_list(path)
    assert boycotts["ABC"].is_boycotted
    assert boycotts["ABC"].reasons == ("r",)


# -- Business activity screen -------------------------------------------------

@pytest.mark.parametrize(
    "sector, industry, expected",
    [
        ("Technology", "Semiconductors", True),
        ("FINANCE", "NATIONAL COMMERCIAL BANKS", False),
        ("Financial Services", "Insurance - Life", False),
        ("Consumer Defensive", "Beverages - Wineries & Distilleries", False),
        ("Consumer Cyclical", "Resorts & Casinos", False),
        ("", "", True),
    ],
)
def test_is_halal_business(sector, industry, expected):
    assert is_halal_business(sector, industry) is expected


# -- Alpha Vantage -------------------------------------------------------------

def test_alpha_vantage_lookup(fake_session):
    session = fake_session(ACME_PAYLOADS)
    source = AlphaVantageDataSource("key", session=session, boycott_list={})

    record = source.lookup("acme")

    assert record.ticker == "ACME"
    assert record.name == "Acme Corp"
    assert record.source == "alpha_vantage"
    assert record.current_price == 123.45
    assert record.pe_ratio == 25.5
    assert record.dividend_yield is None
    assert record.metrics.total_debt == 150_000_000
    assert record.metrics.cash_and_equivalents == 200_000_000
    assert record.metrics.non_halal_revenue == pytest.approx(10_000_000)
    assert record.metrics.is_halal_business is True
    assert [call["function"] for call in session.calls] == [
        "OVERVIEW", "GLOBAL_QUOTE", "BALANCE_SHEET",
    ]
    assert all(call["apikey"] == "key" and call["symbol"] == "ACME" for call in session.calls)


def test_alpha_vantage_estimates_haram_revenue(fake_session):
    payloads = dict(ACME_PAYLOADS)
    payloads["OVERVIEW"] = {**ACME_PAYLOADS["OVERVIEW"], "Industry": "NATIONAL COMMERCIAL BANKS"}
    source = AlphaVantageDataSource("key", session=fake_session(payloads), boycott_list={})

    metrics = source.lookup("ACME").metrics
    assert metrics.is_halal_business is False
    assert metrics.non_halal_revenue == pytest.approx(450_000_000)


def test_alpha_vantage_empty_overview_is_not_found(fake_session):
    payloads = {**ACME_PAYLOADS, "OVERVIEW": {}}
    source = AlphaVantageDataSource("key", session=fake_session(payloads), boycott_list={})
    with pytest.raises(TickerNotFound):
        source.lookup("NOPE")


def test_alpha_vantage_throttle_is_data_source_error(fake_session):
    payloads = {"OVERVIEW": {"Note": "Thank you for using Alpha Vantage! Our standard API rate limit is 25 requests per day."}}
    source = AlphaVantageDataSource("key", session=fake_session(payloads), boycott_list={})
    with pytest.raises(DataSourceError, match="rate limit"):
        source.lookup("ACME")


def test_alpha_vantage_transport_error(fake_session):
    session = fake_session(error=requests.ConnectionError("connection refused"))
    source = AlphaVantageDataSource("key", session=session, boycott_list={})
    with pytest.raises(DataSourceError, match="connection refused"):
        source.lookup("ACME")


def test_alpha_vantage_http_error(fake_session):
    source = AlphaVantageDataSource(
        "key", session=fake_session(ACME_PAYLOADS, status_code=503), boycott_list={}
    )
    with pytest.raises(DataSourceError):
        source.lookup("ACME")


def test_alpha_vantage_requires_key():
    with pytest.raises(ValueError):
        AlphaVantageDataSource("")


# -- Fallback ------------------------------------------------------------------

def test_fallback_uses_secondary_on_provider_error(fake_session, mock_source):
    live = AlphaVantageDataSource(
        "key", session=fake_session(error=requests.Timeout("timed out")), boycott_list={}
    )
    source = FallbackDataSource(live, mock_source)

    record = source.lookup("AAPL")
    assert record.source == "mock_data"
    assert source.name == "alpha_vantage+mock_data"


def test_fallback_prefers_primary(fake_session, mock_source):
    live = AlphaVantageDataSource("key", session=fake_session(ACME_PAYLOADS), boycott_list={})
    record = FallbackDataSource(live, mock_source).lookup("ACME")
    assert record.source == "alpha_vantage"


def test_fallback_raises_when_both_miss(fake_session, mock_source):
    live = AlphaVantageDataSource(
        "key", session=fake_session({**ACME_PAYLOADS, "OVERVIEW": {}}), boycott_list={}
    )
    with pytest.raises(TickerNotFound):
        FallbackDataSource(live, mock_source).lookup("ZZZZ")


def test_default_data_source_without_key():
    assert isinstance(default_data_source(api_key=None), MockDataSource)


def test_default_data_source_with_key():
    source = default_data_source(api_key="key")
    assert isinstance(source, FallbackDataSource)
    assert isinstance(source.primary, AlphaVantageDataSource)
