from __future__ import annotations

import uuid
from types import SimpleNamespace

import pytest

from supplier_pricing.pipeline.errors import JobNotSubmittableError
from supplier_pricing.submission.approval import ensure_submittable, submit_for_approval


def _job(status: str, valid_rows: int):
    return SimpleNamespace(
        id=uuid.uuid4(),
        status=status,
        valid_rows=valid_rows,
        invalid_rows=0,
        store_id="store-1",
        supplier_id="supplier-1",
    )


def test_pending_job_with_valid_rows_is_submittable():
    job = _job("pending_approval", 3)

    assert submit_for_approval(job) is job
    assert job.status == "pending_approval"


@pytest.mark.parametrize("status", ["uploaded", "processing", "validation_failed", "approved"])
def test_wrong_status_is_rejected(status):
    with pytest.raises(JobNotSubmittableError, match=f"Cannot submit price update with status: {status}"):
        ensure_submittable(_job(status, 3))


def test_no_valid_rows_is_rejected():
    with pytest.raises(JobNotSubmittableError, match="No valid price updates to submit for approval"):
        ensure_submittable(_job("pending_approval", 0))
