"""Price update request/response schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from supplier_pricing.core.constants import JobStatus, StagedRowStatus


class JobErrorRecord(BaseModel):
    """One error on a job; row 0 means the whole file."""

    row: int = Field(..., ge=0)
    field: str | None = None
    message: str


class UploadResponse(BaseModel):
    """Returned by the upload endpoint once the job is queued."""

    id: UUID
    status: JobStatus
    file_name: str
    message: str = "Price update file uploaded; processing has started"


class JobSummary(BaseModel):
    """Job row as shown in list views."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    store_id: str
    supplier_id: str
    file_name: str
    file_kind: str
    file_size: int | None
    status: JobStatus
    total_rows: int
    valid_rows: int
    invalid_rows: int
    errors: list[JobErrorRecord]
    created_at: datetime
    processing_started_at: datetime | None
    completed_at: datetime | None


class JobListResponse(BaseModel):
    data: list[JobSummary]
    total: int


class StagedRowResponse(BaseModel):
    """One staged row of a job."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    row_number: int
    raw_data: dict[str, Any]
    normalized_data: dict[str, Any]
    supplier_product_id: UUID | None
    old_price: Decimal | None
    validation_errors: list[dict[str, Any]]
    status: StagedRowStatus


class JobDetailResponse(JobSummary):
    """Job with its staged rows in source-file order."""

    staged_updates: list[StagedRowResponse]


class StagedRowCounts(BaseModel):
    valid: int = 0
    invalid: int = 0


class AdminJobDetailResponse(JobDetailResponse):
    """Admin view: job, staged rows and a valid/invalid breakdown."""

    summary: StagedRowCounts


class SubmitResponse(BaseModel):
    id: UUID
    status: JobStatus
    valid_rows: int
    message: str = "Price update submitted for approval"
