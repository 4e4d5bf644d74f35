from __future__ import annotations

import asyncio
import os
import time
import uuid
from decimal import Decimal

import pytest
from conftest import csv_bytes, xlsx_bytes
from sqlalchemy import update

from supplier_pricing.core.constants import MSG_PRICE_NOT_POSITIVE, MSG_SKU_NOT_FOUND
from supplier_pricing.db.models import PriceUpdateJob
from supplier_pricing.ingestion.file_store import LocalFileStore
from supplier_pricing.pipeline.errors import ProcessingTimeoutError
from supplier_pricing.pipeline.orchestrator import JobOrchestrator
from supplier_pricing.repositories import price_update_jobs, staged_updates
from supplier_pricing.validation.business_rules import MaxDeviationRule


@pytest.fixture()
def orchestrator(session_factory, file_store):
    return JobOrchestrator(session_factory=session_factory, file_store=file_store, rules=[])


def _process(orchestrator, job_id):
    return asyncio.run(orchestrator.process(job_id))


# ─── Scenarios ─────────────────────────────────────────────

def test_mixed_file_goes_to_pending_approval(orchestrator, seed_catalog, make_job, load_job):
    ids = seed_catalog({"SKU001": "25.00"})
    job_id = make_job("prices.csv", csv_bytes([["SKU", "Price"], ["SKU001", "29.99"], ["SKU002", "-5"]]))

    result = _process(orchestrator, job_id)

    assert (result.status, result.total_rows, result.valid_rows, result.invalid_rows) == (
        "pending_approval", 2, 1, 1,
    )
    job, rows = load_job(job_id)
    assert job.status == "pending_approval"
    assert (job.total_rows, job.valid_rows, job.invalid_rows) == (2, 1, 1)
    assert job.processing_started_at is not None
    assert job.completed_at is not None
    assert job.errors == [
        {"row": 2, "field": "sku", "message": MSG_SKU_NOT_FOUND},
        {"row": 2, "field": "price", "message": MSG_PRICE_NOT_POSITIVE},
    ]

    first, second = rows
    assert (first.row_number, first.status) == (1, "valid")
    assert first.supplier_product_id == ids["SKU001"]
    assert Decimal(first.old_price) == Decimal("25.00")
    assert first.normalized_data == {"sku": "SKU001", "new_price": "29.99"}
    assert first.raw_data == {"SKU": "SKU001", "Price": "29.99"}
    assert first.validation_errors == []
    assert (second.row_number, second.status) == (2, "invalid")
    assert second.supplier_product_id is None
    assert len(second.validation_errors) == 2


def test_missing_price_column_fails_whole_file(orchestrator, make_job, load_job):
    job_id = make_job("prices.csv", csv_bytes([["SKU", "Name"], ["SKU001", "Widget"]]))

    result = _process(orchestrator, job_id)

    assert result.status == "validation_failed"
    job, rows = load_job(job_id)
    assert job.status == "validation_failed"
    assert (job.total_rows, job.valid_rows, job.invalid_rows) == (0, 0, 0)
    assert job.errors == [{"row": 0, "field": None, "message": "Missing required column(s): Price"}]
    assert job.completed_at is not None
    assert rows == []


def test_all_rows_invalid_fails_job(orchestrator, seed_catalog, make_job, load_job):
    seed_catalog({"OTHER": "1.00"})
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "1"], ["B", "2"], ["C", "3"]]))

    result = _process(orchestrator, job_id)

    assert result.status == "validation_failed"
    job, rows = load_job(job_id)
    assert (job.total_rows, job.valid_rows, job.invalid_rows) == (3, 0, 3)
    assert [e["row"] for e in job.errors] == [1, 2, 3]
    assert {e["message"] for e in job.errors} == {MSG_SKU_NOT_FOUND}
    assert [r.status for r in rows] == ["invalid"] * 3


def test_deleted_file_is_recorded_on_job(orchestrator, make_job, load_job):
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "1"]]))
    job, _ = load_job(job_id)
    os.remove(job.file_url)

    result = _process(orchestrator, job_id)

    assert result.status == "validation_failed"
    job, rows = load_job(job_id)
    assert job.status == "validation_failed"
    assert len(job.errors) == 1
    assert job.errors[0]["row"] == 0
    assert job.errors[0]["message"].startswith("Processing failed: File not found: ")
    assert job.completed_at is not None
    assert rows == []


def test_spreadsheet_upload(orchestrator, seed_catalog, make_job, load_job):
    seed_catalog({"ABC": "10.00", "DEF": "4.00"})
    job_id = make_job("prices.xlsx", xlsx_bytes([["Item Code", "Cost Price"], ["abc", 11.5], ["def", 4]]))

    result = _process(orchestrator, job_id)

    assert (result.status, result.valid_rows) == ("pending_approval", 2)
    _, rows = load_job(job_id)
    assert [r.normalized_data["new_price"] for r in rows] == ["11.5", "4"]


def test_unsupported_file_kind_on_job(orchestrator, session_factory, make_job, load_job):
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "1"]]))

    async def _corrupt_kind():
        async with session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(PriceUpdateJob).where(PriceUpdateJob.id == job_id).values(file_kind="pdf")
                )

    asyncio.run(_corrupt_kind())

    result = _process(orchestrator, job_id)

    assert result.status == "validation_failed"
    job, _ = load_job(job_id)
    assert job.errors == [{"row": 0, "field": None, "message": "Unsupported file kind: pdf"}]


# ─── Invariants ────────────────────────────────────────────

def test_staged_row_numbers_are_dense_and_unique(orchestrator, seed_catalog, make_job, load_job):
    seed_catalog({f"SKU{i:03d}": "5.00" for i in range(0, 60, 2)})
    lines = [["sku", "price"]] + [[f"sku{i:03d}", str(i + 1)] for i in range(60)]
    job_id = make_job("prices.csv", csv_bytes(lines))

    result = _process(orchestrator, job_id)

    job, rows = load_job(job_id)
    assert [r.row_number for r in rows] == list(range(1, 61))
    assert job.valid_rows + job.invalid_rows == job.total_rows == 60
    assert job.valid_rows == 30
    assert len(result.staged_row_ids) == 60
    assert [e["row"] for e in job.errors] == sorted(e["row"] for e in job.errors)


def test_second_run_is_a_no_op(orchestrator, seed_catalog, make_job, load_job):
    seed_catalog({"A": "1.00"})
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"]]))

    first = _process(orchestrator, job_id)
    second = _process(orchestrator, job_id)

    assert first.status == "pending_approval"
    assert second is None
    job, rows = load_job(job_id)
    assert (job.status, job.total_rows, len(rows)) == ("pending_approval", 1, 1)


def test_unknown_job_is_a_no_op(orchestrator):
    assert _process(orchestrator, uuid.uuid4()) is None


def test_claim_succeeds_once(session_factory, make_job):
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"]]))

    async def _claim():
        async with session_factory() as session:
            async with session.begin():
                return await price_update_jobs.claim_job(session, job_id)

    assert asyncio.run(_claim()) is True
    assert asyncio.run(_claim()) is False


# ─── Failure paths ─────────────────────────────────────────

class SlowFileStore(LocalFileStore):
    async def read(self, locator: str) -> bytes:
        await asyncio.sleep(5)
        return await super().read(locator)


def test_timeout_fails_job(session_factory, tmp_path, make_job, load_job):
    store = SlowFileStore(tmp_path / "uploads")
    orchestrator = JobOrchestrator(session_factory=session_factory, file_store=store, timeout_seconds=0.2)
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"]]))

    with pytest.raises(ProcessingTimeoutError):
        _process(orchestrator, job_id)

    job, rows = load_job(job_id)
    assert job.status == "validation_failed"
    assert job.errors == [{"row": 0, "field": None, "message": "Processing timed out after 0.2 seconds"}]
    assert job.completed_at is not None
    assert rows == []


def test_staging_failure_rolls_back_and_fails_job(
    orchestrator, seed_catalog, make_job, load_job, monkeypatch,
):
    seed_catalog({"A": "1.00", "B": "1.00"})
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"], ["B", "3"]]))

    real_append = staged_updates.append_staged_update
    calls = []

    async def flaky_append(db, **kwargs):
        calls.append(kwargs["row_number"])
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return await real_append(db, **kwargs)

    monkeypatch.setattr(staged_updates, "append_staged_update", flaky_append)

    with pytest.raises(RuntimeError, match="disk full"):
        _process(orchestrator, job_id)

    job, rows = load_job(job_id)
    assert job.status == "validation_failed"
    assert (job.total_rows, job.valid_rows, job.invalid_rows) == (0, 0, 0)
    assert job.errors == [{"row": 0, "field": None, "message": "Processing failed: disk full"}]
    assert rows == []


def test_jobs_are_scoped_to_their_supplier(orchestrator, seed_catalog, make_job):
    seed_catalog({"A": "1.00"}, supplier_id="someone-else")
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"]]))

    result = _process(orchestrator, job_id)

    assert result.status == "validation_failed"
    assert result.errors[0].message == MSG_SKU_NOT_FOUND


def test_out_of_range_price_only_fails_its_row(session_factory, file_store, seed_catalog, make_job, load_job):
    seed_catalog({"A": "10.00", "B": "10.00"})
    orchestrator = JobOrchestrator(
        session_factory=session_factory,
        file_store=file_store,
        rules=[MaxDeviationRule(max_pct=Decimal("50"))],
    )
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "11"], ["B", "1e30"]]))

    result = _process(orchestrator, job_id)

    assert (result.status, result.valid_rows, result.invalid_rows) == ("pending_approval", 1, 1)
    job, rows = load_job(job_id)
    assert [r.status for r in rows] == ["valid", "invalid"]
    assert job.errors == [{"row": 2, "field": "price", "message": "Price out of range: 1e30"}]


class SlowRule:
    name = "slow"
    field = "price"

    def check(self, new_price, entry):
        time.sleep(2)
        return None


def test_timeout_interrupts_slow_validation(session_factory, file_store, seed_catalog, make_job, load_job):
    seed_catalog({"A": "1.00"})
    orchestrator = JobOrchestrator(
        session_factory=session_factory,
        file_store=file_store,
        rules=[SlowRule()],
        timeout_seconds=0.3,
        max_workers=1,
    )
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"], ["A", "3"], ["A", "4"]]))

    started = time.monotonic()
    with pytest.raises(ProcessingTimeoutError):
        _process(orchestrator, job_id)

    assert time.monotonic() - started < 1.8
    job, rows = load_job(job_id)
    assert job.status == "validation_failed"
    assert job.errors == [{"row": 0, "field": None, "message": "Processing timed out after 0.3 seconds"}]
    assert rows == []


class SocketTimeoutFileStore(LocalFileStore):
    async def read(self, locator: str) -> bytes:
        raise TimeoutError("read timed out")


def test_timeout_from_io_is_reported_as_failure(session_factory, tmp_path, make_job, load_job):
    store = SocketTimeoutFileStore(tmp_path / "uploads")
    orchestrator = JobOrchestrator(session_factory=session_factory, file_store=store, timeout_seconds=30)
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"]]))

    with pytest.raises(TimeoutError, match="read timed out") as excinfo:
        _process(orchestrator, job_id)

    assert not isinstance(excinfo.value, ProcessingTimeoutError)
    job, _ = load_job(job_id)
    assert job.status == "validation_failed"
    assert job.errors == [{"row": 0, "field": None, "message": "Processing failed: read timed out"}]


def test_failure_after_completion_leaves_job_untouched(orchestrator, seed_catalog, make_job, load_job):
    seed_catalog({"A": "1.00"})
    job_id = make_job("prices.csv", csv_bytes([["sku", "price"], ["A", "2"]]))
    _process(orchestrator, job_id)

    asyncio.run(orchestrator._fail(orchestrator.session_factory, job_id, "late failure", orchestrator.logger))

    job, _ = load_job(job_id)
    assert job.status == "pending_approval"
    assert job.errors == []
