"""
Configuration module for the Halal Stock Screener.

Centralizes screening standards, status labels, recommendation lists,
business-activity keywords, live data settings and logging setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"

MOCK_FUNDAMENTALS_CSV: Path = DATA_DIR / "mock_fundamentals.csv"
BOYCOTT_LIST_JSON: Path = DATA_DIR / "boycott_list.json"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.environ.get("HALAL_SCREENER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str, level: str | int = LOG_LEVEL) -> logging.Logger:
    """Return a logger with a single stream handler attached."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


# ---------------------------------------------------------------------------
# Screening standards (percent thresholds, upper-bound exclusive)
# ---------------------------------------------------------------------------
# key -> (name, description, max debt %, max cash %, max non-halal revenue %)
STANDARDS: dict[str, tuple[str, str, float, float, float]] = {
    "standard": (
        "Standard",
        "Common screening thresholds used by most Shariah indices.",
        33.0,
        33.0,
        5.0,
    ),
    "strict": (
        "Strict",
        "Conservative thresholds for investors who want minimal exposure.",
        5.0,
        10.0,
        1.0,
    ),
    "aaoifi": (
        "AAOIFI",
        "Accounting and Auditing Organization for Islamic Financial Institutions.",
        30.0,
        30.0,
        5.0,
    ),
    "malaysia": (
        "Securities Commission Malaysia",
        "Malaysian Shariah Advisory Council business activity benchmarks.",
        33.0,
        33.0,
        5.0,
    ),
    "dowjones": (
        "Dow Jones Islamic Market",
        "Dow Jones Islamic Market index screens.",
        33.0,
        33.0,
        5.0,
    ),
}

DEFAULT_STANDARD: str = "standard"

# ---------------------------------------------------------------------------
# Status labels
# ---------------------------------------------------------------------------
SHARIAH_LABELS: dict[str, str] = {
    "halal": "Shariah Compliant",
    "haram": "Haram Business",
    "mixed": "Mixed (Purification Required)",
}

BOYCOTT_LABELS: dict[str, str] = {
    "boycott": "Boycotted",
    "clear": "No Boycott Issues",
}

# ---------------------------------------------------------------------------
# Recommendations (mode -> list of picks)
# ---------------------------------------------------------------------------
RECOMMENDATIONS: dict[str, list[dict[str, str]]] = {
    "general": [
        {"ticker": "AAPL", "name": "Apple Inc.", "reason": "Clean tech company with minimal debt"},
        {"ticker": "NVDA", "name": "NVIDIA Corporation", "reason": "Leading semiconductor company"},
        {"ticker": "TSLA", "name": "Tesla, Inc.", "reason": "Clean energy and sustainable transport"},
    ],
    "strict": [
        {"ticker": "NVDA", "name": "NVIDIA Corporation", "reason": "Low debt ratio, minimal non-halal revenue"},
        {"ticker": "TSLA", "name": "Tesla, Inc.", "reason": "Clean business model, low debt"},
    ],
}

RECOMMENDATION_DESCRIPTIONS: dict[str, str] = {
    "general": "Stocks that pass common Shariah screening criteria",
    "strict": "Stocks that meet strict Islamic finance criteria",
}

MAX_RECOMMENDATIONS: int = 3

# ---------------------------------------------------------------------------
# Business-activity screen for live data
# ---------------------------------------------------------------------------
HARAM_SECTOR_KEYWORDS: tuple[str, ...] = (
    "Banks",
    "Insurance",
    "Gambling",
    "Alcohol",
    "Tobacco",
    "Adult Entertainment",
)

HARAM_INDUSTRY_KEYWORDS: tuple[str, ...] = (
    "Banks",
    "Insurance",
    "Gambling",
    "Casinos",
    "Tobacco",
    "Wineries",
    "Distilleries",
    "Brewers",
)

# Live feeds carry no revenue breakdown; impure revenue is estimated.
NON_HALAL_REVENUE_ESTIMATE_HARAM: float = 0.90
NON_HALAL_REVENUE_ESTIMATE_HALAL: float = 0.02

# ---------------------------------------------------------------------------
# Alpha Vantage
# ---------------------------------------------------------------------------
ALPHA_VANTAGE_API_KEY: str | None = os.environ.get("ALPHA_VANTAGE_API_KEY") or None
ALPHA_VANTAGE_BASE_URL: str = os.environ.get(
    "ALPHA_VANTAGE_BASE_URL", "https://www.alphavantage.co/query"
)
ALPHA_VANTAGE_TIMEOUT: float = float(os.environ.get("ALPHA_VANTAGE_TIMEOUT", "30"))
