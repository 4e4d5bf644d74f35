"""
StagedPriceUpdate — one row per data row of an uploaded price file.

Both valid and invalid rows are staged so operators can audit every
line of the upload.  Rows are write-once: the approval workflow reads
them, nothing in the ingestion pipeline rewrites them.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from supplier_pricing.db.models.base import Base, JSONColumn, generate_uuid, utcnow


class StagedPriceUpdate(Base):
    """Per-row staging record for a price update job."""

    __tablename__ = "staged_price_updates"
    __table_args__ = (
        UniqueConstraint("job_id", "row_number", name="uq_staged_price_updates_job_row"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    job_id = Column(Uuid(as_uuid=True), ForeignKey("price_update_jobs.id"), nullable=False, index=True)

    # ── Denormalized tenant keys (for filtering) ──
    store_id = Column(String(64), nullable=False)
    supplier_id = Column(String(64), nullable=False)

    # ── Source position (1-based, header excluded) ──
    row_number = Column(Integer, nullable=False)

    # ── Payload ───────────────────────────────
    raw_data = Column(JSONColumn, nullable=False, default=dict)         # Column → raw string, verbatim
    normalized_data = Column(JSONColumn, nullable=False, default=dict)  # {sku, new_price}

    # ── Catalog resolution ────────────────────
    supplier_product_id = Column(Uuid(as_uuid=True), ForeignKey("supplier_products.id"), nullable=True)
    old_price = Column(Numeric(12, 2), nullable=True)

    # ── Outcome ───────────────────────────────
    validation_errors = Column(JSONColumn, nullable=False, default=list)  # [{field, message}]
    status = Column(String(16), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # ── Relationships ─────────────────────────
    job = relationship("PriceUpdateJob", back_populates="staged_updates")
    supplier_product = relationship("SupplierProduct")

    def __repr__(self) -> str:
        return f"<StagedPriceUpdate job={self.job_id} row={self.row_number} status={self.status}>"
