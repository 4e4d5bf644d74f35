"""
Supplier price update endpoints — upload, list, detail, submit.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_pricing.api.deps import get_db, get_file_store, get_store_id, get_supplier_id
from supplier_pricing.api.schemas.price_updates import (
    JobDetailResponse,
    JobListResponse,
    JobSummary,
    StagedRowResponse,
    SubmitResponse,
    UploadResponse,
)
from supplier_pricing.core.config import settings
from supplier_pricing.core.constants import JobStatus, StagedRowStatus
from supplier_pricing.core.logging import get_logger
from supplier_pricing.ingestion.file_fingerprint import compute_content_hash
from supplier_pricing.ingestion.file_store import FileStore
from supplier_pricing.pipeline.errors import JobNotSubmittableError, UnsupportedFileKindError
from supplier_pricing.processing.format_detector import detect_file_kind
from supplier_pricing.repositories import price_update_jobs, staged_updates
from supplier_pricing.submission.approval import submit_for_approval

router = APIRouter(prefix="/price-updates", tags=["Price Updates"])
logger = get_logger(__name__)

STAGED_ROWS_LIMIT = 1000


# ─── Upload ───────────────────────────────────────────────
@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=UploadResponse)
async def upload_price_file(
    file: UploadFile = File(...),
    store_id: str = Depends(get_store_id),
    supplier_id: str = Depends(get_supplier_id),
    file_store: FileStore = Depends(get_file_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Accept a price file and queue it for processing.

    1. Checks extension, emptiness and size
    2. Stores the bytes and creates the job in `uploaded`
    3. Commits, then dispatches the Celery task; never waits on it
    """
    filename = file.filename or ""
    try:
        file_kind = detect_file_kind(filename)
    except UnsupportedFileKindError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only CSV and Excel files (.csv, .xlsx, .xls) are allowed",
        ) from None

    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the maximum size of {settings.MAX_UPLOAD_BYTES} bytes",
        )

    locator = await file_store.save(filename, data)
    job = await price_update_jobs.create_job(
        db,
        store_id=store_id,
        supplier_id=supplier_id,
        file_url=locator,
        file_name=filename,
        file_kind=file_kind,
        file_size=len(data),
    )
    # The worker must see the job row before it runs
    await db.commit()

    log = logger.bind(job_id=str(job.id), store_id=store_id, supplier_id=supplier_id)
    log.info(
        "Price file uploaded",
        file_name=filename,
        file_kind=file_kind.value,
        file_size=len(data),
        sha256=compute_content_hash(data),
    )

    from supplier_pricing.tasks.processing_tasks import process_price_update

    try:
        task = process_price_update.delay(str(job.id))
        log.info("Processing dispatched", celery_task_id=task.id)
    except Exception as exc:
        # Job stays `uploaded`; it can be re-enqueued without a new upload
        log.exception("Failed to dispatch processing", error=str(exc))

    return UploadResponse(id=job.id, status=JobStatus(job.status), file_name=filename)


# ─── List ─────────────────────────────────────────────────
@router.get("", response_model=JobListResponse)
async def list_price_updates(
    status_filter: JobStatus | None = Query(default=None, alias="status"),
    store_id: str = Depends(get_store_id),
    supplier_id: str = Depends(get_supplier_id),
    db: AsyncSession = Depends(get_db),
):
    """The supplier's jobs, newest first."""
    jobs = await price_update_jobs.list_jobs(
        db,
        store_id=store_id,
        supplier_id=supplier_id,
        status=status_filter.value if status_filter else None,
        limit=100,
    )
    return JobListResponse(data=[JobSummary.model_validate(j) for j in jobs], total=len(jobs))


# ─── Detail ───────────────────────────────────────────────
@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_price_update(
    job_id: UUID,
    row_status: StagedRowStatus | None = None,
    store_id: str = Depends(get_store_id),
    supplier_id: str = Depends(get_supplier_id),
    db: AsyncSession = Depends(get_db),
):
    """One job with its staged rows in source-file order."""
    job = await price_update_jobs.get_supplier_job(db, job_id, store_id=store_id, supplier_id=supplier_id)
    if not job:
        raise HTTPException(status_code=404, detail="Price update not found")

    rows = await staged_updates.list_staged_updates(
        db,
        job.id,
        status=row_status.value if row_status else None,
        limit=STAGED_ROWS_LIMIT,
    )
    return JobDetailResponse(
        **JobSummary.model_validate(job).model_dump(),
        staged_updates=[StagedRowResponse.model_validate(r) for r in rows],
    )


# ─── Submit ───────────────────────────────────────────────
@router.post("/{job_id}/submit", response_model=SubmitResponse)
async def submit_price_update(
    job_id: UUID,
    store_id: str = Depends(get_store_id),
    supplier_id: str = Depends(get_supplier_id),
    db: AsyncSession = Depends(get_db),
):
    """Hand a processed job over to the approval workflow."""
    job = await price_update_jobs.get_supplier_job(db, job_id, store_id=store_id, supplier_id=supplier_id)
    if not job:
        raise HTTPException(status_code=404, detail="Price update not found")

    try:
        submit_for_approval(job)
    except JobNotSubmittableError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None

    return SubmitResponse(id=job.id, status=JobStatus(job.status), valid_rows=job.valid_rows)
