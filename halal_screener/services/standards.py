"""
Standard registry.

Holds the single set of ``StandardDefinition`` objects shared by every
caller and resolves screening-mode keys to them.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from halal_screener.config import STANDARDS
from halal_screener.exceptions import UnknownStandard
from halal_screener.models import StandardDefinition


def _normalize(key: str) -> str:
    return key.strip().lower()


class StandardRegistry(Mapping):
    """Read-only, case-insensitive mapping of key -> StandardDefinition."""

    def __init__(self, standards: list[StandardDefinition]):
        self._standards: dict[str, StandardDefinition] = {}
        for standard in standards:
            key = _normalize(standard.key)
            if key in self._standards:
                raise ValueError(f"Duplicate standard key: '{standard.key}'")
            self._standards[key] = standard

    def __getitem__(self, key: str) -> StandardDefinition:
        return self._standards[_normalize(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._standards)

    def __len__(self) -> int:
        return len(self._standards)

    def get_standard(self, key: str | None) -> StandardDefinition:
        """Return the standard for *key*; raise ``UnknownStandard`` otherwise."""
        if not key or _normalize(key) not in self._standards:
            raise UnknownStandard(key or "", list(self._standards))
        return self._standards[_normalize(key)]


def build_registry(
    table: Mapping[str, tuple[str, str, float, float, float]] = STANDARDS,
) -> StandardRegistry:
    """Build a registry from a ``key -> (name, description, debt, cash, revenue)`` table."""
    return StandardRegistry(
        [
            StandardDefinition(
                key=key,
                name=name,
                description=description,
                max_debt_ratio_percent=debt,
                max_cash_ratio_percent=cash,
                max_non_halal_revenue_percent=revenue,
            )
            for key, (name, description, debt, cash, revenue) in table.items()
        ]
    )


DEFAULT_REGISTRY: StandardRegistry = build_registry()
