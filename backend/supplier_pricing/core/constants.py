"""Shared constants and enums used across the application."""

from enum import StrEnum


class JobStatus(StrEnum):
    """Lifecycle status of a price update job.

    The pipeline only produces UPLOADED → PROCESSING → {PENDING_APPROVAL,
    VALIDATION_FAILED}.  The remaining values belong to the approval
    workflow and are listed so the enumeration stays closed.
    """

    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PENDING_APPROVAL = "pending_approval"
    VALIDATION_FAILED = "validation_failed"
    APPROVED = "approved"
    APPLIED = "applied"
    REJECTED = "rejected"


class FileKind(StrEnum):
    """Declared kind of an uploaded price file."""

    DELIMITED_TEXT = "delimited-text"
    SPREADSHEET = "spreadsheet"


class StagedRowStatus(StrEnum):
    """Validation outcome of a staged row."""

    VALID = "valid"
    INVALID = "invalid"


# Upload extension → declared file kind
EXTENSION_FILE_KINDS: dict[str, FileKind] = {
    ".csv": FileKind.DELIMITED_TEXT,
    ".xlsx": FileKind.SPREADSHEET,
    ".xls": FileKind.SPREADSHEET,
}

# Row number used for file-level (non row-specific) job errors
FILE_LEVEL_ROW = 0

# Error messages surfaced on jobs and staged rows
MSG_SKU_REQUIRED = "SKU is required"
MSG_SKU_NOT_FOUND = "SKU not found for this supplier"
MSG_PRICE_NOT_POSITIVE = "price must be a positive number"
MSG_NO_DATA_ROWS = "File contains no data rows"
