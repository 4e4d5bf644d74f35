"""
Job status state machine.

    uploaded ──▶ processing ──▶ pending_approval ──▶ approved ──▶ applied
                          └──▶ validation_failed         └──▶ rejected

Only the first two hops belong to the ingestion pipeline; the approval
hops are listed so that the guard covers every status a job can hold.
All status writes go through `transition()`.
"""

from __future__ import annotations

from supplier_pricing.core.constants import JobStatus
from supplier_pricing.pipeline.errors import InvalidStatusTransitionError

ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.UPLOADED: frozenset({JobStatus.PROCESSING}),
    JobStatus.PROCESSING: frozenset({JobStatus.PENDING_APPROVAL, JobStatus.VALIDATION_FAILED}),
    JobStatus.PENDING_APPROVAL: frozenset({JobStatus.APPROVED, JobStatus.REJECTED}),
    JobStatus.APPROVED: frozenset({JobStatus.APPLIED}),
    JobStatus.VALIDATION_FAILED: frozenset(),
    JobStatus.APPLIED: frozenset(),
    JobStatus.REJECTED: frozenset(),
}

# Statuses after which the pipeline takes no further automatic action
PIPELINE_TERMINAL: frozenset[JobStatus] = frozenset({
    JobStatus.PENDING_APPROVAL,
    JobStatus.VALIDATION_FAILED,
})


def can_transition(current: str, target: str) -> bool:
    """Return True if `current → target` is an allowed status change."""
    try:
        return JobStatus(target) in ALLOWED_TRANSITIONS[JobStatus(current)]
    except ValueError:
        return False


def transition(job, target: JobStatus) -> None:
    """Move `job.status` to `target` or raise InvalidStatusTransitionError."""
    if not can_transition(job.status, target):
        raise InvalidStatusTransitionError(
            str(job.status),
            str(target),
            job_id=str(job.id) if getattr(job, "id", None) else None,
        )
    job.status = target.value


def final_status(total_rows: int, invalid_rows: int) -> JobStatus:
    """Terminal status once every row is staged.

    All rows invalid (including an empty file) fails the job; any valid
    row makes it ready for approval.
    """
    if invalid_rows == total_rows:
        return JobStatus.VALIDATION_FAILED
    return JobStatus.PENDING_APPROVAL
