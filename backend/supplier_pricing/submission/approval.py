"""
Approval hand-off for processed price update jobs.

The approval workflow itself (review, apply to live prices) lives
outside this service.  Suppliers can only hand over a job that is
already `pending_approval` and has something to apply; the status
does not change here.
"""

from __future__ import annotations

from supplier_pricing.core.constants import JobStatus
from supplier_pricing.core.logging import get_logger
from supplier_pricing.db.models.price_update_job import PriceUpdateJob
from supplier_pricing.pipeline.errors import JobNotSubmittableError

logger = get_logger(__name__)


def ensure_submittable(job: PriceUpdateJob) -> None:
    """Raise JobNotSubmittableError unless the job can go to approval."""
    if job.status != JobStatus.PENDING_APPROVAL:
        raise JobNotSubmittableError(
            f"Cannot submit price update with status: {job.status}",
            job_id=str(job.id),
        )
    if not job.valid_rows:
        raise JobNotSubmittableError(
            "No valid price updates to submit for approval",
            job_id=str(job.id),
        )


def submit_for_approval(job: PriceUpdateJob) -> PriceUpdateJob:
    """Re-confirm preconditions and hand the job to the approval queue."""
    ensure_submittable(job)
    logger.info(
        "Price update submitted for approval",
        job_id=str(job.id),
        store_id=job.store_id,
        supplier_id=job.supplier_id,
        valid_rows=job.valid_rows,
        invalid_rows=job.invalid_rows,
    )
    return job
