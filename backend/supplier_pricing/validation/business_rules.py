"""
Pluggable price sanity rules.

A rule runs only after the row's SKU resolved and its price is a
positive number.  Every configured rule runs; each failure adds one
error to the row, so a row can fail several rules at once.

Rules are read-only over the row and the catalog snapshot.  Adding a
rule means implementing `SanityRule` and passing it to RowValidator
(or listing it in `default_rules`).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from supplier_pricing.core.config import settings

__all__ = [
    "CatalogEntry",
    "SanityRule",
    "MaxDeviationRule",
    "UnchangedPriceRule",
    "default_rules",
]


@dataclass(frozen=True)
class CatalogEntry:
    """Read-only snapshot of one supplier product at validation time."""

    product_id: object
    sku: str
    current_price: Decimal


class SanityRule(Protocol):
    """A per-row price check evaluated against the current catalog price."""

    name: str
    field: str

    def check(self, new_price: Decimal, entry: CatalogEntry) -> str | None:
        """Return an error message, or None if the row passes."""
        ...


@dataclass(frozen=True)
class MaxDeviationRule:
    """Reject price changes larger than `max_pct` percent of the current price."""

    max_pct: Decimal
    name: str = "max_deviation"
    field: str = "price"

    def check(self, new_price: Decimal, entry: CatalogEntry) -> str | None:
        current = entry.current_price
        if current is None or current <= 0:
            return None
        change_pct = abs(new_price - current) / current * 100
        if change_pct > self.max_pct:
            return (
                f"price change of {change_pct:.1f}% exceeds "
                f"the allowed {self.max_pct}% (current price {current})"
            )
        return None


@dataclass(frozen=True)
class UnchangedPriceRule:
    """Reject rows whose new price equals the current price."""

    name: str = "unchanged_price"
    field: str = "price"

    def check(self, new_price: Decimal, entry: CatalogEntry) -> str | None:
        if entry.current_price is not None and new_price == entry.current_price:
            return f"new price equals the current price ({entry.current_price})"
        return None


def default_rules() -> list[SanityRule]:
    """Sanity rules enabled through application settings."""
    rules: list[SanityRule] = []
    if settings.PRICE_MAX_DEVIATION_PCT is not None:
        rules.append(MaxDeviationRule(max_pct=Decimal(str(settings.PRICE_MAX_DEVIATION_PCT))))
    if settings.REJECT_UNCHANGED_PRICES:
        rules.append(UnchangedPriceRule())
    return rules
