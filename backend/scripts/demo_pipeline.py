#!/usr/bin/env python3
"""
Demo script — parse and validate a price file locally without a database,
Redis or Celery.

The catalog comes from a second CSV (`sku,price`); every SKU not listed
there is reported as not found, exactly like a real job would.

Usage:
    cd backend
    python -m scripts.demo_pipeline prices.csv catalog.csv
    python -m scripts.demo_pipeline prices.xlsx           # empty catalog
"""

import asyncio
import csv
import os
import sys
import uuid
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _load_catalog(path):
    """Read `sku,price` rows into CatalogEntry objects keyed by canonical SKU."""
    from supplier_pricing.processing.mapper import normalize_sku
    from supplier_pricing.validation.business_rules import CatalogEntry

    catalog = {}
    with open(path, newline="", encoding="utf-8-sig") as fh:
        for record in csv.DictReader(fh):
            sku = normalize_sku(record.get("sku"))
            if sku:
                catalog[sku] = CatalogEntry(
                    product_id=uuid.uuid5(uuid.NAMESPACE_OID, sku),
                    sku=sku,
                    current_price=Decimal(record["price"]),
                )
    return catalog


async def run(price_file, catalog_file=None):
    from supplier_pricing.core.logging import setup_logging
    from supplier_pricing.pipeline.state import final_status
    from supplier_pricing.processing.format_detector import detect_file_kind
    from supplier_pricing.processing.parser import parse_price_file
    from supplier_pricing.validation.row_validator import RowValidator

    setup_logging("INFO")
    catalog = _load_catalog(catalog_file) if catalog_file else {}

    async def lookup(store_id, supplier_id, skus):
        return {sku: catalog[sku] for sku in skus if sku in catalog}

    data = Path(price_file).read_bytes()
    parsed = parse_price_file(data, detect_file_kind(price_file))

    print(f"\n{'─' * 50}")
    print(f"  File         : {price_file}")
    print(f"  Catalog SKUs : {len(catalog)}")

    if parsed.parse_errors:
        print("  Status       : validation_failed (file-level)")
        for message in parsed.parse_errors:
            print(f"    ✗ row 0: {message}")
        return

    outcomes = await RowValidator(lookup).validate(parsed.rows, "demo-store", "demo-supplier")
    invalid = sum(1 for o in outcomes if not o.validation.is_valid)

    print(f"  Rows         : {len(outcomes)} ({len(outcomes) - invalid} valid, {invalid} invalid)")
    print(f"  Status       : {final_status(len(outcomes), invalid).value}")
    print()
    for outcome in outcomes:
        row, result = outcome.row, outcome.validation
        icon = "✓" if result.is_valid else "✗"
        change = f"{result.old_price} → {row.normalized.new_price}" if result.old_price is not None else row.normalized.new_price
        print(f"    {icon} row {row.row_number}: {row.normalized.sku or '<blank>'} {change}")
        for error in result.errors:
            print(f"        {error.field}: {error.message}")


if __name__ == "__main__":
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        sys.exit(0)
    asyncio.run(run(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))
