"""
RowValidator — resolves each parsed row against the catalog and price rules.

Rows are independent: the catalog snapshot for the job is fetched once
(read-only), then every row is checked on a bounded thread pool and the
results are returned in input order.  Nothing here writes to the
catalog or the job.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from supplier_pricing.core.config import settings
from supplier_pricing.core.constants import MSG_PRICE_NOT_POSITIVE, MSG_SKU_NOT_FOUND, MSG_SKU_REQUIRED
from supplier_pricing.core.logging import get_logger
from supplier_pricing.pipeline.context import ParsedRow, RowError, RowOutcome, ValidationResult
from supplier_pricing.processing.mapper import PRICE_FIELD, SKU_FIELD
from supplier_pricing.validation.business_rules import CatalogEntry, SanityRule, default_rules

logger = get_logger(__name__)

# (store_id, supplier_id, skus) → {sku: CatalogEntry}
CatalogLookup = Callable[[str, str, set[str]], Awaitable[dict[str, CatalogEntry]]]


class RowValidator:
    """Validate parsed rows for one store/supplier."""

    def __init__(
        self,
        catalog_lookup: CatalogLookup,
        rules: Iterable[SanityRule] | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.catalog_lookup = catalog_lookup
        self.rules: list[SanityRule] = list(rules) if rules is not None else default_rules()
        self.max_workers = max_workers or settings.VALIDATION_MAX_WORKERS

    async def validate(
        self,
        rows: list[ParsedRow],
        store_id: str,
        supplier_id: str,
    ) -> list[RowOutcome]:
        """Return one RowOutcome per input row, in input order."""
        if not rows:
            return []

        skus = {row.normalized.sku for row in rows if row.normalized.sku}
        catalog = await self.catalog_lookup(store_id, supplier_id, skus)

        # Cancellation drops rows that have not started yet
        loop = asyncio.get_running_loop()
        pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="row-validate")
        try:
            results = await asyncio.gather(
                *(loop.run_in_executor(pool, self.validate_row, row, catalog) for row in rows)
            )
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        outcomes = [RowOutcome(row=row, validation=result) for row, result in zip(rows, results)]

        logger.info(
            "Row validation complete",
            store_id=store_id,
            supplier_id=supplier_id,
            total=len(outcomes),
            valid=sum(1 for o in outcomes if o.validation.is_valid),
            catalog_matches=len(catalog),
            rules=[rule.name for rule in self.rules],
        )
        return outcomes

    def validate_row(self, row: ParsedRow, catalog: dict[str, CatalogEntry]) -> ValidationResult:
        """Apply SKU, price and sanity rules to one row.  Pure function of its inputs."""
        errors: list[RowError] = []

        # ── Rule 1: SKU resolves for this store + supplier ──
        sku = row.normalized.sku
        entry = catalog.get(sku) if sku else None
        if not sku:
            errors.append(RowError(field=SKU_FIELD, message=MSG_SKU_REQUIRED))
        elif entry is None:
            errors.append(RowError(field=SKU_FIELD, message=MSG_SKU_NOT_FOUND))

        # ── Rule 2: price is a finite number > 0 ──
        price = row.normalized.new_price
        price_ok = False
        if row.parse_warnings:
            errors.extend(RowError(field=PRICE_FIELD, message=w) for w in row.parse_warnings)
        elif price is None or not price.is_finite() or price <= 0:
            errors.append(RowError(field=PRICE_FIELD, message=MSG_PRICE_NOT_POSITIVE))
        else:
            price_ok = True

        # ── Rule 3: sanity rules, only once 1 and 2 pass ──
        if entry is not None and price_ok:
            for rule in self.rules:
                try:
                    message = rule.check(price, entry)
                except ArithmeticError as exc:
                    logger.warning(
                        "Sanity rule could not evaluate row",
                        rule=rule.name,
                        row=row.row_number,
                        error=repr(exc),
                    )
                    message = f"price could not be checked by rule {rule.name}"
                if message:
                    errors.append(RowError(field=rule.field, message=message))

        return ValidationResult(
            errors=tuple(errors),
            supplier_product_id=entry.product_id if entry else None,
            old_price=entry.current_price if entry else None,
        )
