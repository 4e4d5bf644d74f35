"""
Abstract base class for all extractors.

An extractor turns raw file bytes into a header plus data rows of raw
cell values.  It knows nothing about price columns or the catalog;
column mapping and normalization happen in `processing.parser`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any


class ExtractionError(Exception):
    """The file is structurally unreadable (corrupt, wrong encoding, no sheet)."""
    pass


@dataclass
class TabularData:
    """Header row and data rows as read from the file, in source order."""

    columns: list[str]
    rows: list[list[Any]] = field(default_factory=list)


class BaseExtractor(ABC):
    """Base interface for tabular file extractors."""

    @abstractmethod
    def extract(self, data: bytes) -> TabularData:
        """Read the header and data rows.  Raises ExtractionError."""
        ...

    @abstractmethod
    def supports_kind(self, file_kind: str) -> bool:
        """Return True if this extractor handles the given file kind."""
        ...


def cell_to_text(value: Any) -> str:
    """Render a raw cell value as the string kept for audit."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def is_blank_row(values: list[Any]) -> bool:
    """True if every cell in the row is empty or whitespace."""
    return all(cell_to_text(v).strip() == "" for v in values)
