"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_pricing.db.session import get_db as _get_db
from supplier_pricing.ingestion.file_store import FileStore, LocalFileStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


def get_file_store() -> FileStore:
    """Where uploads are written; overridden in tests."""
    return LocalFileStore()


async def get_store_id(x_store_id: str | None = Header(default=None)) -> str:
    """Store identity, established by the gateway in front of this service."""
    if not x_store_id or not x_store_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Store context is required",
        )
    return x_store_id.strip()


async def get_supplier_id(x_supplier_id: str | None = Header(default=None)) -> str:
    """Supplier identity, established by the gateway in front of this service."""
    if not x_supplier_id or not x_supplier_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Supplier context is required",
        )
    return x_supplier_id.strip()
