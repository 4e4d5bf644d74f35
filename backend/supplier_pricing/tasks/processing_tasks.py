"""
Celery tasks — price file processing.

Wires the JobOrchestrator into the Celery task system.  The upload
endpoint enqueues one task per job; the orchestrator's claim makes a
redelivered task a no-op.
"""

import asyncio
import uuid

import structlog

from supplier_pricing.pipeline.orchestrator import JobOrchestrator
from supplier_pricing.tasks import celery_app

logger = structlog.get_logger("tasks.processing")


@celery_app.task(bind=True, name="supplier_pricing.tasks.processing_tasks.process_price_update")
def process_price_update(self, job_id: str) -> dict | None:
    """
    Process an uploaded price file through parse → validate → stage.

    Returns the job summary, or None when the job was not claimable.
    """
    task_log = logger.bind(task_id=self.request.id, job_id=job_id)
    task_log.info("Price update task started")

    try:
        # Fresh engine per run: asyncio.run() creates a new loop each time
        result = asyncio.run(JobOrchestrator().process(uuid.UUID(job_id)))
    except Exception as exc:
        task_log.exception("Price update task failed", error=str(exc))
        raise

    if result is None:
        task_log.info("Price update task skipped, job not claimable")
        return None

    summary = result.to_summary_dict()
    task_log.info("Price update task finished", **summary)
    return summary
