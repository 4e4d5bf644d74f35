from __future__ import annotations

import uuid
from decimal import Decimal

from supplier_pricing.core.config import settings
from supplier_pricing.validation.business_rules import (
    CatalogEntry,
    MaxDeviationRule,
    UnchangedPriceRule,
    default_rules,
)

ENTRY = CatalogEntry(product_id=uuid.uuid4(), sku="ABC", current_price=Decimal("10.00"))


def test_max_deviation_allows_changes_within_limit():
    rule = MaxDeviationRule(max_pct=Decimal("25"))
    assert rule.check(Decimal("12.50"), ENTRY) is None
    assert rule.check(Decimal("7.50"), ENTRY) is None


def test_max_deviation_rejects_large_changes():
    message = MaxDeviationRule(max_pct=Decimal("25")).check(Decimal("20.00"), ENTRY)
    assert message == "price change of 100.0% exceeds the allowed 25% (current price 10.00)"


def test_max_deviation_ignores_zero_current_price():
    entry = CatalogEntry(product_id=ENTRY.product_id, sku="ABC", current_price=Decimal("0"))
    assert MaxDeviationRule(max_pct=Decimal("1")).check(Decimal("5"), entry) is None


def test_unchanged_price_rule():
    rule = UnchangedPriceRule()
    assert rule.check(Decimal("10"), ENTRY) == "new price equals the current price (10.00)"
    assert rule.check(Decimal("10.01"), ENTRY) is None


def test_default_rules_disabled_unless_configured(monkeypatch):
    monkeypatch.setattr(settings, "PRICE_MAX_DEVIATION_PCT", None)
    monkeypatch.setattr(settings, "REJECT_UNCHANGED_PRICES", False)
    assert default_rules() == []

    monkeypatch.setattr(settings, "PRICE_MAX_DEVIATION_PCT", 30.0)
    monkeypatch.setattr(settings, "REJECT_UNCHANGED_PRICES", True)
    assert [rule.name for rule in default_rules()] == ["max_deviation", "unchanged_price"]


def test_max_deviation_reports_huge_changes_without_raising():
    message = MaxDeviationRule(max_pct=Decimal("50")).check(Decimal("1e30"), ENTRY)

    assert message.startswith("price change of 1000000000")
    assert message.endswith("exceeds the allowed 50% (current price 10.00)")
