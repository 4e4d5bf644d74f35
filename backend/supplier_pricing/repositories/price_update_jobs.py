"""
Price update job repository.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

import uuid

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_pricing.core.constants import JobStatus
from supplier_pricing.db.models.base import utcnow
from supplier_pricing.db.models.price_update_job import PriceUpdateJob
from supplier_pricing.processing.format_detector import coerce_file_kind


async def create_job(
    db: AsyncSession,
    *,
    store_id: str,
    supplier_id: str,
    file_url: str,
    file_name: str,
    file_kind: str,
    file_size: int | None = None,
) -> PriceUpdateJob:
    """Create a job in `uploaded` with zeroed counters and no errors.

    Raises UnsupportedFileKindError for an unknown file kind.
    """
    kind = coerce_file_kind(file_kind)
    job = PriceUpdateJob(
        store_id=store_id,
        supplier_id=supplier_id,
        file_url=file_url,
        file_name=file_name,
        file_kind=kind.value,
        file_size=file_size,
        status=JobStatus.UPLOADED.value,
        total_rows=0,
        valid_rows=0,
        invalid_rows=0,
        errors=[],
    )
    db.add(job)
    await db.flush()
    return job


async def get_job(db: AsyncSession, job_id: uuid.UUID) -> PriceUpdateJob | None:
    """Fetch a job by primary key."""
    return await db.get(PriceUpdateJob, job_id)


async def get_supplier_job(
    db: AsyncSession,
    job_id: uuid.UUID,
    *,
    store_id: str,
    supplier_id: str,
) -> PriceUpdateJob | None:
    """Fetch a job only if it belongs to the given store and supplier."""
    stmt = select(PriceUpdateJob).where(
        PriceUpdateJob.id == job_id,
        PriceUpdateJob.store_id == store_id,
        PriceUpdateJob.supplier_id == supplier_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_jobs(
    db: AsyncSession,
    *,
    store_id: str | None = None,
    supplier_id: str | None = None,
    status: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[PriceUpdateJob]:
    """List jobs newest first with optional tenant and status filters."""
    stmt = select(PriceUpdateJob).order_by(desc(PriceUpdateJob.created_at))
    if store_id:
        stmt = stmt.where(PriceUpdateJob.store_id == store_id)
    if supplier_id:
        stmt = stmt.where(PriceUpdateJob.supplier_id == supplier_id)
    if status:
        stmt = stmt.where(PriceUpdateJob.status == status)
    stmt = stmt.limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def claim_job(db: AsyncSession, job_id: uuid.UUID) -> bool:
    """Atomically move a job from `uploaded` to `processing`.

    Compare-and-set on status: exactly one caller wins.  Also records
    the processing start time.  Returns False if the job does not exist
    or is no longer `uploaded`.
    """
    stmt = (
        update(PriceUpdateJob)
        .where(
            PriceUpdateJob.id == job_id,
            PriceUpdateJob.status == JobStatus.UPLOADED.value,
        )
        .values(
            status=JobStatus.PROCESSING.value,
            processing_started_at=utcnow(),
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1
