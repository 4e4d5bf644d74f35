"""
Column mapper — finds the SKU and price columns and normalizes their cells.

Header matching is case-insensitive with whitespace trimmed and
collapsed, and accepts the aliases suppliers commonly use.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from supplier_pricing.processing.extractors.base import cell_to_text

SKU_FIELD = "sku"
PRICE_FIELD = "price"

# Display names used in "missing column" messages
REQUIRED_FIELDS: dict[str, str] = {
    SKU_FIELD: "SKU",
    PRICE_FIELD: "Price",
}

COLUMN_ALIASES: dict[str, str] = {
    # SKU
    "sku": SKU_FIELD,
    "product sku": SKU_FIELD,
    "product_sku": SKU_FIELD,
    "item code": SKU_FIELD,
    "itemcode": SKU_FIELD,
    "product code": SKU_FIELD,
    # Price
    "price": PRICE_FIELD,
    "new price": PRICE_FIELD,
    "newprice": PRICE_FIELD,
    "cost price": PRICE_FIELD,
    "costprice": PRICE_FIELD,
    "cost": PRICE_FIELD,
    "supplier price": PRICE_FIELD,
    "supplierprice": PRICE_FIELD,
}

CURRENCY_SYMBOLS = "$€£₹¥"
_THOUSANDS_RE = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")

# Largest price a Numeric(12, 2) column holds
MAX_PRICE = Decimal("9999999999.99")


class ColumnMappingError(Exception):
    """Required columns are missing or mapped more than once."""
    pass


@dataclass(frozen=True)
class ColumnMap:
    """Positions of the required columns within the header."""

    sku_index: int
    price_index: int


def normalize_header(name: str) -> str:
    """Lower-case and collapse whitespace: '  New   Price ' → 'new price'."""
    return " ".join(str(name).split()).lower()


def resolve_columns(columns: list[str]) -> ColumnMap:
    """Locate the SKU and price columns.  Raises ColumnMappingError."""
    found: dict[str, int] = {}
    for index, name in enumerate(columns):
        target = COLUMN_ALIASES.get(normalize_header(name))
        if target is None:
            continue
        if target in found:
            raise ColumnMappingError(
                f"Duplicate {REQUIRED_FIELDS[target]} column: "
                f"'{columns[found[target]].strip()}' and '{name.strip()}'"
            )
        found[target] = index

    missing = [label for key, label in REQUIRED_FIELDS.items() if key not in found]
    if missing:
        raise ColumnMappingError(f"Missing required column(s): {', '.join(missing)}")

    return ColumnMap(sku_index=found[SKU_FIELD], price_index=found[PRICE_FIELD])


def normalize_sku(value: Any) -> str:
    """Trim and upper-case a SKU cell; blank cells become ''."""
    return cell_to_text(value).strip().upper()


def parse_price(value: Any) -> tuple[Decimal | None, str | None]:
    """Parse a price cell.

    Returns (price, warning).  Blank cells give (None, None); text that
    is not a decimal number gives (None, "Invalid price format: ...").
    Finite values beyond MAX_PRICE are rejected with a warning.
    Non-finite values (NaN, Infinity) parse and are left to validation.
    """
    if value is None:
        return None, None
    if isinstance(value, bool):
        return None, f"Invalid price format: {cell_to_text(value)}"
    if isinstance(value, (int, Decimal)):
        return _bounded(Decimal(value), cell_to_text(value))
    if isinstance(value, float):
        return _bounded(Decimal(repr(value)), cell_to_text(value))

    text = str(value).strip()
    if not text:
        return None, None

    cleaned = text
    if cleaned[0] in CURRENCY_SYMBOLS:
        cleaned = cleaned[1:].strip()
    if _THOUSANDS_RE.match(cleaned):
        cleaned = cleaned.replace(",", "")

    try:
        price = Decimal(cleaned)
    except InvalidOperation:
        return None, f"Invalid price format: {text}"
    return _bounded(price, text)


def _bounded(price: Decimal, text: str) -> tuple[Decimal | None, str | None]:
    if price.is_finite() and abs(price) > MAX_PRICE:
        return None, f"Price out of range: {text}"
    return price, None
