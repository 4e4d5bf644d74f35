"""
StagingStore — write-once persistence of per-row outcomes.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit (staging appends are flushed by the
  caller together with the job's final write)

There is no update or delete here: staged rows are immutable once
written.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_pricing.core.constants import StagedRowStatus
from supplier_pricing.db.models.base import generate_uuid
from supplier_pricing.db.models.staged_price_update import StagedPriceUpdate


async def append_staged_update(
    db: AsyncSession,
    *,
    job_id: uuid.UUID,
    store_id: str,
    supplier_id: str,
    row_number: int,
    raw_data: dict[str, str],
    normalized_data: dict[str, Any],
    supplier_product_id: uuid.UUID | None,
    old_price: Decimal | None,
    validation_errors: list[dict[str, Any]],
    status: StagedRowStatus,
) -> uuid.UUID:
    """Stage one row and return its ID (assigned before flush)."""
    staged = StagedPriceUpdate(
        id=generate_uuid(),
        job_id=job_id,
        store_id=store_id,
        supplier_id=supplier_id,
        row_number=row_number,
        raw_data=raw_data,
        normalized_data=normalized_data,
        supplier_product_id=supplier_product_id,
        old_price=old_price,
        validation_errors=validation_errors,
        status=status.value,
    )
    db.add(staged)
    return staged.id


async def list_staged_updates(
    db: AsyncSession,
    job_id: uuid.UUID,
    *,
    status: str | None = None,
    limit: int | None = None,
) -> list[StagedPriceUpdate]:
    """Staged rows of a job in source-file order, optionally filtered by status."""
    stmt = (
        select(StagedPriceUpdate)
        .where(StagedPriceUpdate.job_id == job_id)
        .order_by(StagedPriceUpdate.row_number)
    )
    if status:
        stmt = stmt.where(StagedPriceUpdate.status == status)
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_staged_updates(db: AsyncSession, job_id: uuid.UUID) -> dict[str, int]:
    """Return {status: count} for a job's staged rows."""
    stmt = (
        select(StagedPriceUpdate.status, func.count())
        .where(StagedPriceUpdate.job_id == job_id)
        .group_by(StagedPriceUpdate.status)
    )
    result = await db.execute(stmt)
    return {status: count for status, count in result.all()}
