"""
Exception hierarchy for the screening service.

Domain code raises these; the HTTP layer maps them to status codes.
"""

from __future__ import annotations


class ScreenerError(Exception):
    """Base class for every error raised by the screener."""


class InvalidMetrics(ScreenerError):
    """Financial metrics that cannot produce a meaningful ratio."""


class UnknownStandard(ScreenerError):
    """No standard is registered under the requested key."""

    def __init__(self, key: str, known: list[str] | None = None):
        self.key = key
        self.known = sorted(known or [])
        message = f"Unknown screening standard: '{key}'"
        if self.known:
            message += f". Allowed: {', '.join(self.known)}"
        super().__init__(message)


class TickerNotFound(ScreenerError):
    """The data source has no record for the ticker."""

    def __init__(self, ticker: str, source: str | None = None):
        self.ticker = ticker
        self.source = source
        message = f"Stock not found: '{ticker}'"
        if source:
            message += f" (source: {source})"
        super().__init__(message)


class DataSourceError(ScreenerError):
    """The upstream data provider failed or refused the request."""
