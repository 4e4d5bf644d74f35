from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from supplier_pricing.ingestion.file_fingerprint import compute_content_hash
from supplier_pricing.ingestion.file_store import LocalFileStore
from supplier_pricing.pipeline.errors import FileAccessError


def test_save_then_read(tmp_path: Path):
    store = LocalFileStore(tmp_path / "uploads")

    locator = asyncio.run(store.save("My Prices.XLSX", b"data"))

    path = Path(locator)
    assert path.parent == tmp_path / "uploads"
    assert path.name.startswith("price-update-")
    assert path.suffix == ".xlsx"
    assert asyncio.run(store.read(locator)) == b"data"


def test_each_upload_gets_its_own_file(tmp_path: Path):
    store = LocalFileStore(tmp_path)

    first = asyncio.run(store.save("p.csv", b"a"))
    second = asyncio.run(store.save("p.csv", b"b"))

    assert first != second


def test_read_missing_file(tmp_path: Path):
    store = LocalFileStore(tmp_path)
    missing = str(tmp_path / "gone.csv")

    with pytest.raises(FileAccessError, match="File not found: "):
        asyncio.run(store.read(missing))


def test_content_hash_is_stable():
    assert compute_content_hash(b"abc") == compute_content_hash(b"abc")
    assert compute_content_hash(b"abc") != compute_content_hash(b"abd")
    assert len(compute_content_hash(b"abc")) == 64
