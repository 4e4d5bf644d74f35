"""
PriceUpdateJob — one row per uploaded price update file.

Created as `uploaded` by the upload endpoint, then driven through
processing by the JobOrchestrator.  Rows are retained for audit and
never deleted by the pipeline.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Uuid
from sqlalchemy.orm import relationship

from supplier_pricing.core.constants import JobStatus
from supplier_pricing.db.models.base import Base, JSONColumn, generate_uuid, utcnow


class PriceUpdateJob(Base):
    """One row per supplier price update upload."""

    __tablename__ = "price_update_jobs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)

    # ── Tenant / uploader ─────────────────────
    store_id = Column(String(64), nullable=False, index=True)
    supplier_id = Column(String(64), nullable=False, index=True)

    # ── File reference ────────────────────────
    file_url = Column(String(1000), nullable=False)
    file_name = Column(String(500), nullable=False)
    file_kind = Column(String(32), nullable=False)
    file_size = Column(BigInteger, nullable=True)

    # ── Status / counters ─────────────────────
    status = Column(String(32), nullable=False, default=JobStatus.UPLOADED.value, index=True)
    total_rows = Column(Integer, nullable=False, default=0)
    valid_rows = Column(Integer, nullable=False, default=0)
    invalid_rows = Column(Integer, nullable=False, default=0)

    # ── Errors: [{row, field, message}], row 0 = file-level ──
    errors = Column(JSONColumn, nullable=False, default=list)

    # ── Timestamps (UTC) ──────────────────────
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    processing_started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # ── Relationships ─────────────────────────
    staged_updates = relationship(
        "StagedPriceUpdate",
        back_populates="job",
        order_by="StagedPriceUpdate.row_number",
    )

    def __repr__(self) -> str:
        return (
            f"<PriceUpdateJob {self.id} store={self.store_id} status={self.status} "
            f"rows={self.valid_rows}/{self.invalid_rows}/{self.total_rows}>"
        )
