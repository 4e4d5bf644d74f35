"""price update jobs, staged rows and supplier catalog

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "supplier_products",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("store_id", sa.String(64), nullable=False),
        sa.Column("supplier_id", sa.String(64), nullable=False),
        sa.Column("supplier_sku", sa.String(128), nullable=False),
        sa.Column("name", sa.String(500), nullable=True),
        sa.Column("cost_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "store_id", "supplier_id", "supplier_sku",
            name="uq_supplier_products_store_supplier_sku",
        ),
    )
    op.create_index("ix_supplier_products_store_id", "supplier_products", ["store_id"])
    op.create_index("ix_supplier_products_supplier_id", "supplier_products", ["supplier_id"])

    op.create_table(
        "price_update_jobs",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("store_id", sa.String(64), nullable=False),
        sa.Column("supplier_id", sa.String(64), nullable=False),
        sa.Column("file_url", sa.String(1000), nullable=False),
        sa.Column("file_name", sa.String(500), nullable=False),
        sa.Column("file_kind", sa.String(32), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("total_rows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("valid_rows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("invalid_rows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("errors", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processing_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_price_update_jobs_store_id", "price_update_jobs", ["store_id"])
    op.create_index("ix_price_update_jobs_supplier_id", "price_update_jobs", ["supplier_id"])
    op.create_index("ix_price_update_jobs_status", "price_update_jobs", ["status"])
    op.create_index("ix_price_update_jobs_created_at", "price_update_jobs", ["created_at"])

    op.create_table(
        "staged_price_updates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("job_id", sa.Uuid(as_uuid=True), sa.ForeignKey("price_update_jobs.id"), nullable=False),
        sa.Column("store_id", sa.String(64), nullable=False),
        sa.Column("supplier_id", sa.String(64), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("raw_data", postgresql.JSONB(), nullable=False),
        sa.Column("normalized_data", postgresql.JSONB(), nullable=False),
        sa.Column(
            "supplier_product_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("supplier_products.id"),
            nullable=True,
        ),
        sa.Column("old_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("validation_errors", postgresql.JSONB(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("job_id", "row_number", name="uq_staged_price_updates_job_row"),
    )
    op.create_index("ix_staged_price_updates_job_id", "staged_price_updates", ["job_id"])
    op.create_index("ix_staged_price_updates_status", "staged_price_updates", ["status"])


def downgrade() -> None:
    op.drop_table("staged_price_updates")
    op.drop_table("price_update_jobs")
    op.drop_table("supplier_products")
