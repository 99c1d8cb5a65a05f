"""
Screening service.

Resolves a screening mode, looks up the ticker through an injected data
source, runs the compliance engine and assembles the response payloads.
"""

from __future__ import annotations

from datetime import datetime, timezone

from halal_screener.config import (
    BOYCOTT_LABELS,
    MAX_RECOMMENDATIONS,
    RECOMMENDATION_DESCRIPTIONS,
    RECOMMENDATIONS,
    SHARIAH_LABELS,
    setup_logger,
)
from halal_screener.models import BoycottStatus, StandardDefinition, StockRecord, Verdict
from halal_screener.schemas import (
    BoycottDetails,
    BoycottVerdict,
    CompanyInfo,
    ComplianceDetails,
    FinancialRatios,
    MultiStandardResponse,
    PriceData,
    Recommendation,
    RecommendationsResponse,
    ScreeningResponse,
    ShariahVerdict,
    StandardInfo,
    StandardsResponse,
    StandardVerdict,
    Thresholds,
)
from halal_screener.services import compliance_engine
from halal_screener.services.data_sources import DataSource
from halal_screener.services.standards import StandardRegistry

logger = setup_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _recommendation_group(mode: str) -> str:
    return "strict" if mode.strip().lower() == "strict" else "general"


def recommendations(mode: str, exclude: str | None = None) -> list[Recommendation]:
    """Return up to ``MAX_RECOMMENDATIONS`` picks for *mode*, minus *exclude*."""
    picks = RECOMMENDATIONS[_recommendation_group(mode)]
    excluded = (exclude or "").upper()
    return [
        Recommendation(**pick) for pick in picks if pick["ticker"] != excluded
    ][:MAX_RECOMMENDATIONS]


def recommendations_response(mode: str) -> RecommendationsResponse:
    group = _recommendation_group(mode)
    return RecommendationsResponse(
        recommendations=recommendations(mode),
        mode=mode.strip().lower(),
        description=RECOMMENDATION_DESCRIPTIONS[group],
    )


# -- Payload builders ---------------------------------------------------------

def _thresholds(standard: StandardDefinition) -> Thresholds:
    return Thresholds(**standard.thresholds())


def _company(record: StockRecord) -> CompanyInfo:
    return CompanyInfo(
        name=record.name,
        ticker=record.ticker,
        sector=record.sector,
        industry=record.industry,
        is_halal_business=record.metrics.is_halal_business,
    )


def _ratios(verdict: Verdict) -> FinancialRatios:
    return FinancialRatios(
        debt_ratio=verdict.debt_ratio_percent,
        cash_ratio=verdict.cash_ratio_percent,
        non_halal_revenue=verdict.non_halal_revenue_percent,
    )


def _shariah(verdict: Verdict, standard: StandardDefinition) -> ShariahVerdict:
    return ShariahVerdict(
        status=verdict.shariah_status.value,
        text=SHARIAH_LABELS[verdict.shariah_status.value],
        thresholds=_thresholds(standard),
        compliance_details=ComplianceDetails(
            debt_compliant=verdict.debt_compliant,
            cash_compliant=verdict.cash_compliant,
            revenue_compliant=verdict.revenue_compliant,
            business_halal=verdict.business_halal,
        ),
    )


def _boycott(record: StockRecord) -> BoycottVerdict:
    status = compliance_engine.boycott_status(record.metrics)
    details = None
    info = record.metrics.boycott_info
    if status is BoycottStatus.BOYCOTT and info is not None:
        details = BoycottDetails(
            is_boycotted=True,
            reasons=list(info.reasons),
            sources=list(info.sources),
        )
    return BoycottVerdict(
        status=status.value,
        text=BOYCOTT_LABELS[status.value],
        details=details,
    )


# -- Operations ---------------------------------------------------------------

def screen(
    ticker: str,
    mode: str,
    source: DataSource,
    registry: StandardRegistry,
) -> ScreeningResponse:
    """
    Screen *ticker* under the standard registered as *mode*.

    The standard is resolved before the data source is consulted, so an
    unknown mode never costs an upstream call.
    """
    standard = registry.get_standard(mode)
    record = source.lookup(ticker)
    verdict = compliance_engine.evaluate(record.metrics, standard)

    logger.info(
        "Screened %s under %s: %s/%s (source=%s)",
        record.ticker,
        standard.key,
        verdict.shariah_status.value,
        verdict.boycott_status.value,
        record.source,
    )

    return ScreeningResponse(
        company=_company(record),
        price_data=PriceData(
            current_price=record.current_price,
            pe_ratio=record.pe_ratio,
            dividend_yield=record.dividend_yield,
        ),
        financial_ratios=_ratios(verdict),
        shariah_verdict=_shariah(verdict, standard),
        boycott_verdict=_boycott(record),
        purification_percentage=verdict.purification_percent,
        screening_mode=standard.key,
        screening_date=_now(),
        data_source=record.source,
        recommendations=recommendations(standard.key, exclude=record.ticker),
    )


def screen_all(
    ticker: str,
    source: DataSource,
    registry: StandardRegistry,
) -> MultiStandardResponse:
    """Screen *ticker* once against every registered standard."""
    record = source.lookup(ticker)
    verdicts = compliance_engine.evaluate_all(record.metrics, registry)

    per_standard = [
        StandardVerdict(
            standard=key,
            name=registry[key].name,
            financial_ratios=_ratios(verdict),
            shariah_verdict=_shariah(verdict, registry[key]),
            purification_percentage=verdict.purification_percent,
        )
        for key, verdict in verdicts.items()
    ]
    return MultiStandardResponse(
        company=_company(record),
        boycott_verdict=_boycott(record),
        verdicts=per_standard,
        screening_date=_now(),
        data_source=record.source,
    )


def list_standards(registry: StandardRegistry, default: str) -> StandardsResponse:
    return StandardsResponse(
        default=default,
        standards=[
            StandardInfo(
                key=standard.key,
                name=standard.name,
                description=standard.description,
                thresholds=_thresholds(standard),
            )
            for standard in registry.values()
        ],
    )
