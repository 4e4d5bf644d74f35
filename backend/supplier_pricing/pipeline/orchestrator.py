"""
JobOrchestrator — drives one price update job through the pipeline.

    uploaded ─claim─▶ processing ─▶ read file ─▶ parse ─▶ validate ─▶ stage
                                                   │                    │
                                   parse errors ◀──┘                    ▼
                                 validation_failed      pending_approval | validation_failed

Responsibilities:
    - Claim the job with a compare-and-set so a job is processed once
    - Run FileParser → RowValidator → StagingStore
    - Aggregate counts and errors in row order, then write the job once
    - Bound the run with a deadline
    - Land every failure on the job before it propagates; a job is never
      left in `processing`
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable

from supplier_pricing.core.config import settings
from supplier_pricing.core.constants import FILE_LEVEL_ROW, JobStatus, StagedRowStatus
from supplier_pricing.core.logging import get_logger
from supplier_pricing.db.models.base import utcnow
from supplier_pricing.db.models.price_update_job import PriceUpdateJob
from supplier_pricing.db.session import make_session_factory
from supplier_pricing.ingestion.file_store import FileStore, LocalFileStore
from supplier_pricing.pipeline.context import JobError, ProcessingResult, RowOutcome
from supplier_pricing.pipeline.errors import (
    FileAccessError,
    JobNotFoundError,
    ProcessingTimeoutError,
    UnsupportedFileKindError,
)
from supplier_pricing.pipeline.state import final_status, transition
from supplier_pricing.processing.format_detector import coerce_file_kind
from supplier_pricing.processing.parser import parse_price_file
from supplier_pricing.repositories import price_update_jobs, staged_updates, supplier_products
from supplier_pricing.validation.business_rules import SanityRule
from supplier_pricing.validation.row_validator import RowValidator


class JobOrchestrator:
    """
    Processes price update jobs end to end.

    Usage (Celery worker)::

        result = asyncio.run(JobOrchestrator().process(job_id))

    Usage (tests / embedded)::

        orchestrator = JobOrchestrator(session_factory=factory, file_store=store)
        result = await orchestrator.process(job_id)

    Without a session_factory a fresh engine is created per call and
    disposed afterwards (each Celery task runs its own event loop).
    """

    def __init__(
        self,
        session_factory=None,
        file_store: FileStore | None = None,
        rules: Iterable[SanityRule] | None = None,
        timeout_seconds: float | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.file_store = file_store or LocalFileStore()
        self.rules = list(rules) if rules is not None else None
        self.timeout_seconds = timeout_seconds or settings.PROCESSING_TIMEOUT_SECONDS
        self.max_workers = max_workers
        self.logger = get_logger("pipeline.orchestrator")

    async def process(self, job_id: uuid.UUID) -> ProcessingResult | None:
        """Process one job.

        Returns the ProcessingResult, or None if the job could not be
        claimed (unknown, already processing, or already finished).
        Re-raises unexpected failures and ProcessingTimeoutError after
        the job has been moved to `validation_failed`.
        """
        if self.session_factory is not None:
            return await self._process(self.session_factory, job_id)

        factory, engine = make_session_factory()
        try:
            return await self._process(factory, job_id)
        finally:
            await engine.dispose()

    # ─── Top level: claim, deadline, failure capture ───────

    async def _process(self, factory, job_id: uuid.UUID) -> ProcessingResult | None:
        log = self.logger.bind(job_id=str(job_id))

        async with factory() as session:
            async with session.begin():
                claimed = await price_update_jobs.claim_job(session, job_id)
            if not claimed:
                job = await price_update_jobs.get_job(session, job_id)
                log.warning(
                    "Job not claimable, skipping",
                    current_status=job.status if job else None,
                    exists=job is not None,
                )
                return None

        log.info("Job claimed, processing started")

        deadline = asyncio.timeout(self.timeout_seconds)
        try:
            async with deadline:
                result = await self._run(factory, job_id, log)
        except TimeoutError as exc:
            if not deadline.expired():
                # A timeout raised by a driver or socket, not the deadline
                await self._record_failure(factory, job_id, exc, log)
                raise
            error = ProcessingTimeoutError(self.timeout_seconds, job_id=str(job_id))
            log.error("Processing timed out", timeout_seconds=self.timeout_seconds)
            await self._fail(factory, job_id, str(error), log)
            raise error from None
        except Exception as exc:
            await self._record_failure(factory, job_id, exc, log)
            raise

        log.info("Processing finished", **result.to_summary_dict())
        return result

    async def _record_failure(self, factory, job_id: uuid.UUID, exc: Exception, log) -> None:
        log.exception("Processing failed", error=str(exc))
        await self._fail(factory, job_id, f"Processing failed: {exc}", log)

    async def _fail(self, factory, job_id: uuid.UUID, message: str, log) -> None:
        """Force a claimed job into `validation_failed` with a row-0 error."""
        async with factory() as session:
            async with session.begin():
                job = await price_update_jobs.get_job(session, job_id)
                if job is None:
                    log.error("Job vanished while recording failure")
                    return
                if job.status == JobStatus.PROCESSING:
                    job.errors = [*(job.errors or []), JobError(row=FILE_LEVEL_ROW, message=message).to_dict()]
                    transition(job, JobStatus.VALIDATION_FAILED)
                    job.total_rows = 0
                    job.valid_rows = 0
                    job.invalid_rows = 0
                    job.completed_at = utcnow()
                else:
                    log.warning("Job no longer processing, failure not recorded", status=job.status, error=message)

    # ─── Pipeline body ─────────────────────────────────────

    async def _run(self, factory, job_id: uuid.UUID, log) -> ProcessingResult:
        async with factory() as session:
            job = await price_update_jobs.get_job(session, job_id)
            if job is None:
                raise JobNotFoundError(f"Price update job not found: {job_id}", job_id=str(job_id))

            log = log.bind(store_id=job.store_id, supplier_id=job.supplier_id, file_kind=job.file_kind)

            # ── 1. Read the file ───────────────────
            try:
                file_kind = coerce_file_kind(job.file_kind)
                data = await self.file_store.read(job.file_url)
            except UnsupportedFileKindError as exc:
                log.warning("Rejected file kind", error=str(exc))
                return await self._finish_file_failure(session, job, [str(exc)])
            except FileAccessError as exc:
                log.warning("File unreadable", error=str(exc))
                return await self._finish_file_failure(session, job, [f"Processing failed: {exc}"])

            # ── 2. Parse (blocking decode, off the loop) ──
            parsed = await asyncio.to_thread(parse_price_file, data, file_kind)
            if parsed.parse_errors:
                log.warning("File-level parse errors", parse_errors=parsed.parse_errors)
                return await self._finish_file_failure(session, job, parsed.parse_errors)

            # ── 3. Validate ────────────────────────
            async def catalog_lookup(store_id: str, supplier_id: str, skus: set[str]):
                return await supplier_products.fetch_catalog_entries(
                    session, store_id=store_id, supplier_id=supplier_id, skus=skus,
                )

            validator = RowValidator(catalog_lookup, rules=self.rules, max_workers=self.max_workers)
            outcomes = await validator.validate(parsed.rows, job.store_id, job.supplier_id)

            # ── 4. Stage + aggregate, 5–6. final write ──
            result = await self._stage_and_summarize(session, job, outcomes)
            await session.commit()
            return result

    async def _stage_and_summarize(
        self,
        session,
        job: PriceUpdateJob,
        outcomes: list[RowOutcome],
    ) -> ProcessingResult:
        """Stage every row in row order, then write the job's terminal state."""
        valid_rows = 0
        invalid_rows = 0
        errors: list[JobError] = []
        staged_ids: list[uuid.UUID] = []

        for outcome in sorted(outcomes, key=lambda o: o.row.row_number):
            row, validation = outcome.row, outcome.validation
            staged_ids.append(
                await staged_updates.append_staged_update(
                    session,
                    job_id=job.id,
                    store_id=job.store_id,
                    supplier_id=job.supplier_id,
                    row_number=row.row_number,
                    raw_data=dict(row.raw_data),
                    normalized_data=row.normalized.to_dict(),
                    supplier_product_id=validation.supplier_product_id,
                    old_price=validation.old_price,
                    validation_errors=[e.to_dict() for e in validation.errors],
                    status=StagedRowStatus.VALID if validation.is_valid else StagedRowStatus.INVALID,
                )
            )
            if validation.is_valid:
                valid_rows += 1
            else:
                invalid_rows += 1
                errors.extend(
                    JobError(row=row.row_number, field=e.field, message=e.message)
                    for e in validation.errors
                )

        total_rows = len(outcomes)
        status = final_status(total_rows, invalid_rows)

        transition(job, status)
        job.total_rows = total_rows
        job.valid_rows = valid_rows
        job.invalid_rows = invalid_rows
        job.errors = [e.to_dict() for e in errors]
        job.completed_at = utcnow()
        await session.flush()

        return ProcessingResult(
            job_id=job.id,
            status=status.value,
            total_rows=total_rows,
            valid_rows=valid_rows,
            invalid_rows=invalid_rows,
            errors=errors,
            staged_row_ids=staged_ids,
        )

    async def _finish_file_failure(
        self,
        session,
        job: PriceUpdateJob,
        messages: list[str],
    ) -> ProcessingResult:
        """File-level failure: row-0 errors, zero counters, no staging."""
        errors = [JobError(row=FILE_LEVEL_ROW, message=m) for m in messages]

        transition(job, JobStatus.VALIDATION_FAILED)
        job.total_rows = 0
        job.valid_rows = 0
        job.invalid_rows = 0
        job.errors = [e.to_dict() for e in errors]
        job.completed_at = utcnow()
        await session.commit()

        return ProcessingResult(
            job_id=job.id,
            status=JobStatus.VALIDATION_FAILED.value,
            errors=errors,
        )
