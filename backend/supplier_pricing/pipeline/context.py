"""
Transient handoff types between the pipeline components.

    FileParser   ──ParseResult / ParsedRow──▶  RowValidator
    RowValidator ──RowOutcome(ValidationResult)──▶  JobOrchestrator
    JobOrchestrator ──ProcessingResult──▶  caller / Celery task

None of these are persisted directly; the orchestrator maps them onto
PriceUpdateJob and StagedPriceUpdate rows.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any


# ═══════════════════════════════════════════════════════════
#  Error records
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RowError:
    """A validation error attached to one staged row."""

    field: str | None
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class JobError:
    """Wire-level error record on a job.  row == 0 means file-level."""

    row: int
    message: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON storage (stable {row, field, message} shape)."""
        return {"row": self.row, "field": self.field, "message": self.message}


# ═══════════════════════════════════════════════════════════
#  Parser output
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class NormalizedPrice:
    """Typed view of a row: canonical SKU and parsed price.

    `sku` is "" when the cell is blank.  `new_price` is None when the
    cell is blank or unparsable (the latter also leaves a parse warning).
    """

    sku: str
    new_price: Decimal | None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the price as a decimal string (no float rounding)."""
        return {
            "sku": self.sku,
            "new_price": str(self.new_price) if self.new_price is not None else None,
        }


@dataclass(frozen=True)
class ParsedRow:
    """One data row of the uploaded file."""

    row_number: int                     # 1-based, header excluded
    raw_data: Mapping[str, str]         # read-only column → raw string
    normalized: NormalizedPrice
    parse_warnings: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        row_number: int,
        raw: dict[str, str],
        normalized: NormalizedPrice,
        parse_warnings: list[str] | None = None,
    ) -> ParsedRow:
        return cls(
            row_number=row_number,
            raw_data=MappingProxyType(dict(raw)),
            normalized=normalized,
            parse_warnings=tuple(parse_warnings or ()),
        )


@dataclass
class ParseResult:
    """Either structurally parseable (rows, no parse_errors) or not (the reverse)."""

    rows: list[ParsedRow] = field(default_factory=list)
    parse_errors: list[str] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @classmethod
    def failed(cls, *errors: str) -> ParseResult:
        return cls(rows=[], parse_errors=list(errors))


# ═══════════════════════════════════════════════════════════
#  Validator output
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one ParsedRow against the catalog."""

    errors: tuple[RowError, ...] = ()
    supplier_product_id: uuid.UUID | None = None
    old_price: Decimal | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class RowOutcome:
    """A parsed row paired with its validation result."""

    row: ParsedRow
    validation: ValidationResult


# ═══════════════════════════════════════════════════════════
#  Orchestrator output
# ═══════════════════════════════════════════════════════════

@dataclass
class ProcessingResult:
    """Final outcome of processing one job."""

    job_id: uuid.UUID
    status: str                         # JobStatus value
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    errors: list[JobError] = field(default_factory=list)
    staged_row_ids: list[uuid.UUID] = field(default_factory=list)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging / Celery results."""
        return {
            "job_id": str(self.job_id),
            "status": self.status,
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "invalid_rows": self.invalid_rows,
            "errors": len(self.errors),
            "staged_rows": len(self.staged_row_ids),
        }
