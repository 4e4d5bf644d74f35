"""
Supplier product repository — catalog reads for SKU resolution.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_pricing.core.config import settings
from supplier_pricing.db.models.supplier_product import SupplierProduct
from supplier_pricing.validation.business_rules import CatalogEntry


async def create_product(
    db: AsyncSession,
    *,
    store_id: str,
    supplier_id: str,
    sku: str,
    cost_price: Decimal,
    name: str | None = None,
) -> SupplierProduct:
    """Create a catalog entry (SKU stored in canonical upper case)."""
    product = SupplierProduct(
        store_id=store_id,
        supplier_id=supplier_id,
        supplier_sku=sku.strip().upper(),
        name=name,
        cost_price=cost_price,
    )
    db.add(product)
    await db.flush()
    return product


async def fetch_catalog_entries(
    db: AsyncSession,
    *,
    store_id: str,
    supplier_id: str,
    skus: set[str],
    chunk_size: int | None = None,
) -> dict[str, CatalogEntry]:
    """Resolve SKUs to catalog snapshots for one store + supplier.

    Queries in chunks to keep the IN list bounded.  SKUs with no match
    are simply absent from the result.
    """
    if not skus:
        return {}

    size = chunk_size or settings.CATALOG_LOOKUP_CHUNK_SIZE
    ordered = sorted(skus)
    entries: dict[str, CatalogEntry] = {}

    for start in range(0, len(ordered), size):
        chunk = ordered[start:start + size]
        stmt = select(SupplierProduct).where(
            SupplierProduct.store_id == store_id,
            SupplierProduct.supplier_id == supplier_id,
            SupplierProduct.supplier_sku.in_(chunk),
        )
        result = await db.execute(stmt)
        for product in result.scalars():
            entries[product.supplier_sku] = CatalogEntry(
                product_id=product.id,
                sku=product.supplier_sku,
                current_price=Decimal(product.cost_price),
            )

    return entries
