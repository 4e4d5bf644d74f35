"""API schema package."""

from supplier_pricing.api.schemas.price_updates import (
    AdminJobDetailResponse,
    JobDetailResponse,
    JobErrorRecord,
    JobListResponse,
    JobSummary,
    StagedRowCounts,
    StagedRowResponse,
    SubmitResponse,
    UploadResponse,
)

__all__ = [
    "AdminJobDetailResponse",
    "JobDetailResponse",
    "JobErrorRecord",
    "JobListResponse",
    "JobSummary",
    "StagedRowCounts",
    "StagedRowResponse",
    "SubmitResponse",
    "UploadResponse",
]
