"""
SupplierProduct — a supplier's catalog entry within one store.

Owned by the catalog module; the price update pipeline only reads it
(SKU resolution and the current cost price snapshot).
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Numeric, String, UniqueConstraint, Uuid

from supplier_pricing.db.models.base import Base, generate_uuid, utcnow


class SupplierProduct(Base):
    """Catalog entry scoped to (store, supplier, SKU)."""

    __tablename__ = "supplier_products"
    __table_args__ = (
        UniqueConstraint("store_id", "supplier_id", "supplier_sku", name="uq_supplier_products_store_supplier_sku"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    store_id = Column(String(64), nullable=False, index=True)
    supplier_id = Column(String(64), nullable=False, index=True)
    supplier_sku = Column(String(128), nullable=False)  # canonical upper case
    name = Column(String(500), nullable=True)
    cost_price = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<SupplierProduct {self.supplier_sku} supplier={self.supplier_id} price={self.cost_price}>"
