"""Comma-separated text extractor (header row required)."""

from __future__ import annotations

import csv
import io

from supplier_pricing.core.constants import FileKind
from supplier_pricing.processing.extractors.base import (
    BaseExtractor,
    ExtractionError,
    TabularData,
    is_blank_row,
)


class CsvExtractor(BaseExtractor):
    """Read UTF-8 comma-separated text.  Fully blank lines are skipped."""

    delimiter = ","

    def extract(self, data: bytes) -> TabularData:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ExtractionError(f"Failed to parse CSV: file is not valid UTF-8 ({exc.reason})") from exc

        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self.delimiter, strict=True)
        try:
            records = [row for row in reader if not is_blank_row(row)]
        except csv.Error as exc:
            raise ExtractionError(f"Failed to parse CSV: {exc}") from exc

        if not records:
            return TabularData(columns=[], rows=[])

        header, *rows = records
        return TabularData(columns=header, rows=rows)

    def supports_kind(self, file_kind: str) -> bool:
        return file_kind == FileKind.DELIMITED_TEXT
