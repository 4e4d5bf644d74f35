"""
File store — where uploaded price files live between upload and processing.

The job only keeps an opaque locator.  LocalFileStore keeps files under
settings.UPLOAD_DIR; an object-storage backend only has to implement
the same two coroutines.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from pathlib import Path
from typing import Protocol

from supplier_pricing.core.config import settings
from supplier_pricing.core.logging import get_logger
from supplier_pricing.pipeline.errors import FileAccessError

logger = get_logger(__name__)


class FileStore(Protocol):
    """Read/write uploaded files by opaque locator."""

    async def save(self, filename: str, data: bytes) -> str:
        """Persist bytes and return a locator for them."""
        ...

    async def read(self, locator: str) -> bytes:
        """Return the bytes for a locator.  Raises FileAccessError."""
        ...


class LocalFileStore:
    """Files on local disk; the locator is the file path."""

    def __init__(self, base_dir: str | os.PathLike | None = None) -> None:
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR)

    async def save(self, filename: str, data: bytes) -> str:
        ext = os.path.splitext(filename)[1].lower()
        path = self.base_dir / f"price-update-{uuid.uuid4().hex}{ext}"
        await asyncio.to_thread(self._write, path, data)
        logger.info("Upload stored", path=str(path), size=len(data))
        return str(path)

    async def read(self, locator: str) -> bytes:
        path = Path(locator)
        if not path.is_file():
            raise FileAccessError(f"File not found: {locator}")
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise FileAccessError(f"File could not be read: {locator} ({exc.strerror})") from exc

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
