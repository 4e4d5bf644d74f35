# Shared pytest fixtures: file-backed SQLite database, file store, price file builders
from __future__ import annotations

import asyncio
import csv
import io
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from supplier_pricing.db.models import Base
from supplier_pricing.ingestion.file_store import LocalFileStore
from supplier_pricing.repositories import price_update_jobs, supplier_products

STORE_ID = "store-1"
SUPPLIER_ID = "supplier-1"


# ─── File builders ─────────────────────────────────────────

def csv_bytes(rows: list[list[object]]) -> bytes:
    """Encode rows (header first) as UTF-8 CSV."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for row in rows:
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")


def xlsx_bytes(rows: list[list[object]]) -> bytes:
    """Write rows (header first) into the first sheet of a new workbook."""
    from openpyxl import Workbook

    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


# ─── Database ──────────────────────────────────────────────

@pytest.fixture()
def session_factory(tmp_path: Path):
    """Session factory over a fresh SQLite file.

    NullPool means every session opens its own connection in the running
    loop, so the factory works across separate asyncio.run() calls.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pricing.db'}", poolclass=NullPool)

    async def _create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_schema())
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def file_store(tmp_path: Path) -> LocalFileStore:
    return LocalFileStore(tmp_path / "uploads")


@pytest.fixture()
def seed_catalog(session_factory):
    """Insert catalog entries: seed_catalog({"ABC": "10.00"}) → {"ABC": product_id}."""

    def _seed(prices: dict[str, str], *, store_id: str = STORE_ID, supplier_id: str = SUPPLIER_ID):
        async def _run():
            async with session_factory() as session:
                async with session.begin():
                    ids = {}
                    for sku, price in prices.items():
                        product = await supplier_products.create_product(
                            session,
                            store_id=store_id,
                            supplier_id=supplier_id,
                            sku=sku,
                            cost_price=Decimal(price),
                        )
                        ids[product.supplier_sku] = product.id
                    return ids

        return asyncio.run(_run())

    return _seed


@pytest.fixture()
def make_job(session_factory, file_store):
    """Store file bytes and create an `uploaded` job; returns the job ID."""

    def _make(
        filename: str,
        data: bytes,
        *,
        file_kind: str | None = None,
        store_id: str = STORE_ID,
        supplier_id: str = SUPPLIER_ID,
        file_url: str | None = None,
    ):
        from supplier_pricing.processing.format_detector import detect_file_kind

        async def _run():
            locator = file_url or await file_store.save(filename, data)
            async with session_factory() as session:
                async with session.begin():
                    job = await price_update_jobs.create_job(
                        session,
                        store_id=store_id,
                        supplier_id=supplier_id,
                        file_url=locator,
                        file_name=filename,
                        file_kind=file_kind or detect_file_kind(filename).value,
                        file_size=len(data),
                    )
                    return job.id

        return asyncio.run(_run())

    return _make


@pytest.fixture()
def load_job(session_factory):
    """Fetch (job, staged rows) fresh from the database."""
    from supplier_pricing.repositories import staged_updates

    def _load(job_id):
        async def _run():
            async with session_factory() as session:
                job = await price_update_jobs.get_job(session, job_id)
                rows = await staged_updates.list_staged_updates(session, job_id)
                return job, rows

        return asyncio.run(_run())

    return _load
