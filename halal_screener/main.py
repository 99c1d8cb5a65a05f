"""
FastAPI application entry point.

Wires up the data source and standard registry, and exposes the
screening, standards and recommendations endpoints under ``/api``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from halal_screener.config import DEFAULT_STANDARD, setup_logger
from halal_screener.exceptions import (
    DataSourceError,
    InvalidMetrics,
    TickerNotFound,
    UnknownStandard,
)
from halal_screener.schemas import (
    MultiStandardResponse,
    RecommendationsResponse,
    ScreeningResponse,
    StandardsResponse,
)
from halal_screener.services import screening_service
from halal_screener.services.data_sources import DataSource, default_data_source
from halal_screener.services.standards import DEFAULT_REGISTRY, StandardRegistry

logger = setup_logger(__name__)

_source: DataSource | None = None


def get_data_source() -> DataSource:
    global _source
    if _source is None:
        _source = default_data_source()
    return _source


def get_registry() -> StandardRegistry:
    return DEFAULT_REGISTRY


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the data source at startup so the first request is fast."""
    source = get_data_source()
    logger.info("Serving screening data from %s", source.name)
    yield


app = FastAPI(
    title="Halal Stock Screener",
    version="1.0.0",
    lifespan=lifespan,
)

# -- CORS (allow all origins for local / dev usage) -------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, UnknownStandard):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TickerNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidMetrics):
        return HTTPException(status_code=422, detail=f"Invalid financial data: {exc}")
    logger.error("Upstream data failure: %s", exc)
    return HTTPException(
        status_code=502,
        detail="Market data provider unavailable. Please try again later.",
    )


_DOMAIN_ERRORS = (UnknownStandard, TickerNotFound, InvalidMetrics, DataSourceError)


# -- Routes ------------------------------------------------------------------

@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


@app.get("/api/screen/{ticker}", response_model=ScreeningResponse)
def screen(
    ticker: str,
    mode: str = Query(DEFAULT_STANDARD, description="Screening standard key."),
    source: DataSource = Depends(get_data_source),
    registry: StandardRegistry = Depends(get_registry),
):
    """Screen one ticker under a single standard."""
    try:
        return screening_service.screen(ticker, mode, source, registry)
    except _DOMAIN_ERRORS as exc:
        raise _http_error(exc) from exc


@app.get("/api/screen/{ticker}/standards", response_model=MultiStandardResponse)
def screen_all_standards(
    ticker: str,
    source: DataSource = Depends(get_data_source),
    registry: StandardRegistry = Depends(get_registry),
):
    """Screen one ticker under every registered standard."""
    try:
        return screening_service.screen_all(ticker, source, registry)
    except _DOMAIN_ERRORS as exc:
        raise _http_error(exc) from exc


@app.get("/api/standards", response_model=StandardsResponse)
def standards(registry: StandardRegistry = Depends(get_registry)):
    return screening_service.list_standards(registry, DEFAULT_STANDARD)


@app.get("/api/recommendations/{mode}", response_model=RecommendationsResponse)
def recommendations(
    mode: str,
    registry: StandardRegistry = Depends(get_registry),
):
    """Curated picks for a screening mode."""
    try:
        registry.get_standard(mode)
    except UnknownStandard as exc:
        raise _http_error(exc) from exc
    return screening_service.recommendations_response(mode)
