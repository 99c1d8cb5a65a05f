"""
Compliance decision engine.

Evaluates financial metrics against a screening standard and returns
a Shariah verdict, a boycott flag and a purification percentage.
"""

from __future__ import annotations

from collections.abc import Mapping

from halal_screener.models import (
    BoycottStatus,
    FinancialMetrics,
    ShariahStatus,
    StandardDefinition,
    Verdict,
)
from halal_screener.utils.ratios import percent_of


def compute_ratios(metrics: FinancialMetrics) -> tuple[float, float, float]:
    """Return ``(debt %, cash %, non-halal revenue %)`` for *metrics*."""
    return (
        percent_of(metrics.total_debt, metrics.market_cap),
        percent_of(metrics.cash_and_equivalents, metrics.market_cap),
        percent_of(metrics.non_halal_revenue, metrics.total_revenue),
    )


def boycott_status(metrics: FinancialMetrics) -> BoycottStatus:
    info = metrics.boycott_info
    if info is not None and info.is_boycotted:
        return BoycottStatus.BOYCOTT
    return BoycottStatus.CLEAR


def evaluate(metrics: FinancialMetrics, standard: StandardDefinition) -> Verdict:
    """
    Classify *metrics* under *standard*.

    A non-permissible core business is ``haram`` whatever its ratios.
    Otherwise the stock is ``halal`` only when every ratio is strictly
    below its threshold, and ``mixed`` if any ratio is at or above it.
    Purification applies to ``mixed`` stocks only.
    """
    debt_ratio, cash_ratio, non_halal_ratio = compute_ratios(metrics)

    debt_ok = debt_ratio < standard.max_debt_ratio_percent
    cash_ok = cash_ratio < standard.max_cash_ratio_percent
    revenue_ok = non_halal_ratio < standard.max_non_halal_revenue_percent

    if not metrics.is_halal_business:
        status = ShariahStatus.HARAM
    elif debt_ok and cash_ok and revenue_ok:
        status = ShariahStatus.HALAL
    else:
        status = ShariahStatus.MIXED

    purification = non_halal_ratio if status is ShariahStatus.MIXED else 0.0

    return Verdict(
        standard=standard.key,
        debt_ratio_percent=debt_ratio,
        cash_ratio_percent=cash_ratio,
        non_halal_revenue_percent=non_halal_ratio,
        debt_compliant=debt_ok,
        cash_compliant=cash_ok,
        revenue_compliant=revenue_ok,
        business_halal=metrics.is_halal_business,
        shariah_status=status,
        boycott_status=boycott_status(metrics),
        purification_percent=purification,
    )


def evaluate_all(
    metrics: FinancialMetrics,
    standards: Mapping[str, StandardDefinition],
) -> dict[str, Verdict]:
    """Evaluate *metrics* against every standard, keyed like *standards*."""
    return {key: evaluate(metrics, standard) for key, standard in standards.items()}
