"""
Spreadsheet extractor — first worksheet, first row is the header.

Supports both .xls (via xlrd) and .xlsx (via openpyxl) workbooks.  The
format is detected from the file signature, not the upload name.
"""

from __future__ import annotations

import io
import struct
import zipfile
from collections.abc import Iterator
from typing import Any
from xml.etree.ElementTree import ParseError

from supplier_pricing.core.constants import FileKind
from supplier_pricing.core.logging import get_logger
from supplier_pricing.processing.extractors.base import (
    BaseExtractor,
    ExtractionError,
    TabularData,
    cell_to_text,
    is_blank_row,
)

logger = get_logger(__name__)

XLSX_SIGNATURE = b"PK\x03\x04"
XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


# ═══════════════════════════════════════════════════════════
#  Sheet Adapters — uniform interface over xlrd / openpyxl
# ═══════════════════════════════════════════════════════════

class XlrdSheetAdapter:
    """Adapter for xlrd sheets (empty cells come back as "")."""

    def __init__(self, sheet) -> None:
        self._s = sheet

    def iter_rows(self) -> Iterator[list[Any]]:
        for r in range(self._s.nrows):
            yield [value if value != "" else None for value in self._s.row_values(r)]


class OpenpyxlSheetAdapter:
    """Adapter for openpyxl worksheets opened in read-only mode."""

    def __init__(self, ws) -> None:
        self._ws = ws

    def iter_rows(self) -> Iterator[list[Any]]:
        for row in self._ws.iter_rows(values_only=True):
            yield list(row)


def _load_first_sheet(data: bytes):
    """Open the workbook from bytes and return an adapter over its first sheet."""
    if data.startswith(XLS_SIGNATURE):
        import xlrd
        from xlrd.compdoc import CompDocError

        try:
            workbook = xlrd.open_workbook(file_contents=data)
        except (xlrd.XLRDError, CompDocError, struct.error, IndexError, ValueError) as exc:
            raise ExtractionError(f"Failed to parse spreadsheet: {exc}") from exc
        if workbook.nsheets == 0:
            raise ExtractionError("No worksheet found in spreadsheet")
        return XlrdSheetAdapter(workbook.sheet_by_index(0))

    if data.startswith(XLSX_SIGNATURE):
        from openpyxl import load_workbook
        from openpyxl.utils.exceptions import InvalidFileException

        try:
            workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException, ParseError, KeyError, ValueError, OSError) as exc:
            raise ExtractionError(f"Failed to parse spreadsheet: {exc}") from exc
        if not workbook.worksheets:
            raise ExtractionError("No worksheet found in spreadsheet")
        return OpenpyxlSheetAdapter(workbook.worksheets[0])

    raise ExtractionError("Failed to parse spreadsheet: not an .xlsx or .xls workbook")


class XlsxExtractor(BaseExtractor):
    """Read the first worksheet of an .xlsx/.xls workbook."""

    def extract(self, data: bytes) -> TabularData:
        header: list[str] | None = None
        rows: list[list[Any]] = []
        try:
            sheet = _load_first_sheet(data)
            for values in sheet.iter_rows():
                if header is None:
                    if is_blank_row(values):
                        continue
                    header = [cell_to_text(v) for v in values]
                    continue
                if is_blank_row(values):
                    continue
                rows.append(values)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"Failed to parse spreadsheet: {exc}") from exc

        logger.debug("Worksheet read", columns=len(header or []), rows=len(rows))
        return TabularData(columns=header or [], rows=rows)

    def supports_kind(self, file_kind: str) -> bool:
        return file_kind == FileKind.SPREADSHEET
