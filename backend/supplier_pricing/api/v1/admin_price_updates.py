"""
Admin review endpoints — jobs awaiting approval across all suppliers.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_pricing.api.deps import get_db
from supplier_pricing.api.schemas.price_updates import (
    AdminJobDetailResponse,
    JobListResponse,
    JobSummary,
    StagedRowCounts,
    StagedRowResponse,
)
from supplier_pricing.api.v1.price_updates import STAGED_ROWS_LIMIT
from supplier_pricing.core.constants import JobStatus, StagedRowStatus
from supplier_pricing.repositories import price_update_jobs, staged_updates

router = APIRouter(prefix="/admin/price-updates", tags=["Admin: Price Updates"])


@router.get("", response_model=JobListResponse)
async def list_jobs_for_review(
    status_filter: JobStatus = Query(default=JobStatus.PENDING_APPROVAL, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """All jobs in a status (default `pending_approval`), newest first."""
    jobs = await price_update_jobs.list_jobs(db, status=status_filter.value, limit=limit, offset=offset)
    return JobListResponse(data=[JobSummary.model_validate(j) for j in jobs], total=len(jobs))


@router.get("/{job_id}", response_model=AdminJobDetailResponse)
async def get_job_for_review(job_id: UUID, db: AsyncSession = Depends(get_db)):
    """Job, staged rows and a valid/invalid breakdown."""
    job = await price_update_jobs.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Price update not found")

    rows = await staged_updates.list_staged_updates(db, job.id, limit=STAGED_ROWS_LIMIT)
    counts = await staged_updates.count_staged_updates(db, job.id)

    return AdminJobDetailResponse(
        **JobSummary.model_validate(job).model_dump(),
        staged_updates=[StagedRowResponse.model_validate(r) for r in rows],
        summary=StagedRowCounts(
            valid=counts.get(StagedRowStatus.VALID.value, 0),
            invalid=counts.get(StagedRowStatus.INVALID.value, 0),
        ),
    )
