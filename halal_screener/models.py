"""
Domain records for Shariah screening.

All records are frozen dataclasses: metrics and standards are inputs
built once per evaluation, verdicts are derived outputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from halal_screener.exceptions import InvalidMetrics


class ShariahStatus(str, Enum):
    HALAL = "halal"
    HARAM = "haram"
    MIXED = "mixed"


class BoycottStatus(str, Enum):
    BOYCOTT = "boycott"
    CLEAR = "clear"


@dataclass(frozen=True)
class BoycottInfo:
    """Externally sourced boycott campaign flag for a company."""

    is_boycotted: bool
    reasons: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "reasons", tuple(self.reasons))
        object.__setattr__(self, "sources", tuple(self.sources))


@dataclass(frozen=True)
class FinancialMetrics:
    """
    Normalized inputs for one compliance evaluation.

    Raises ``InvalidMetrics`` when a numeric field is negative or not
    finite, when ``is_halal_business`` is not a bool, or when ``non_halal_revenue`` exceeds ``total_revenue``.
    """

    market_cap: float
    total_debt: float
    cash_and_equivalents: float
    total_revenue: float
    non_halal_revenue: float
    is_halal_business: bool
    boycott_info: BoycottInfo | None = None

    def __post_init__(self):
        for name in (
            "market_cap",
            "total_debt",
            "cash_and_equivalents",
            "total_revenue",
            "non_halal_revenue",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidMetrics(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidMetrics(f"{name} must be finite, got {value!r}")
            if value < 0:
                raise InvalidMetrics(f"{name} must be non-negative, got {value!r}")

        if not isinstance(self.is_halal_business, bool):
            raise InvalidMetrics(
                f"is_halal_business must be a bool, got {self.is_halal_business!r}"
            )

        if self.non_halal_revenue > self.total_revenue:
            raise InvalidMetrics(
                f"non_halal_revenue ({self.non_halal_revenue!r}) exceeds "
                f"total_revenue ({self.total_revenue!r})"
            )


@dataclass(frozen=True)
class StandardDefinition:
    """Named set of percent thresholds; a ratio passes when strictly below."""

    key: str
    name: str
    max_debt_ratio_percent: float
    max_cash_ratio_percent: float
    max_non_halal_revenue_percent: float
    description: str = ""

    def __post_init__(self):
        for name in (
            "max_debt_ratio_percent",
            "max_cash_ratio_percent",
            "max_non_halal_revenue_percent",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{self.key}: {name} must be finite")
            if value < 0:
                raise ValueError(f"{self.key}: {name} must be non-negative")

    def thresholds(self) -> dict[str, float]:
        return {
            "debt": self.max_debt_ratio_percent,
            "cash": self.max_cash_ratio_percent,
            "revenue": self.max_non_halal_revenue_percent,
        }


@dataclass(frozen=True)
class Verdict:
    standard: str
    debt_ratio_percent: float
    cash_ratio_percent: float
    non_halal_revenue_percent: float
    debt_compliant: bool
    cash_compliant: bool
    revenue_compliant: bool
    business_halal: bool
    shariah_status: ShariahStatus
    boycott_status: BoycottStatus
    purification_percent: float


@dataclass(frozen=True)
class StockRecord:
    """A company profile plus the metrics a data source reported for it."""

    ticker: str
    name: str
    sector: str
    industry: str
    metrics: FinancialMetrics
    current_price: float | None = None
    pe_ratio: float | None = None
    dividend_yield: float | None = None
    source: str = field(default="unknown", compare=False)
