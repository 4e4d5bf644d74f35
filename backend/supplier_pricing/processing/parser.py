"""
FileParser — decodes an uploaded price file into ParsedRows.

Binary split:
    - structurally unreadable file → ParseResult with parse_errors, no rows
    - otherwise → one ParsedRow per data row, even when a cell is bad
      (bad cells become parse warnings for the validator to report)

No knowledge of the catalog or business rules lives here.
"""

from __future__ import annotations

from supplier_pricing.core.constants import MSG_NO_DATA_ROWS
from supplier_pricing.core.logging import get_logger
from supplier_pricing.pipeline.context import NormalizedPrice, ParsedRow, ParseResult
from supplier_pricing.processing.extractors.base import BaseExtractor, ExtractionError, cell_to_text
from supplier_pricing.processing.extractors.csv_extractor import CsvExtractor
from supplier_pricing.processing.extractors.xlsx_extractor import XlsxExtractor
from supplier_pricing.processing.format_detector import coerce_file_kind
from supplier_pricing.processing.mapper import (
    ColumnMap,
    ColumnMappingError,
    normalize_sku,
    parse_price,
    resolve_columns,
)

logger = get_logger(__name__)

EXTRACTORS: list[BaseExtractor] = [CsvExtractor(), XlsxExtractor()]


def get_extractor(file_kind: str) -> BaseExtractor:
    """Return the extractor for a (validated) file kind."""
    kind = coerce_file_kind(file_kind)
    for extractor in EXTRACTORS:
        if extractor.supports_kind(kind):
            return extractor
    raise LookupError(f"No extractor registered for {kind}")


def parse_price_file(data: bytes, file_kind: str) -> ParseResult:
    """Parse raw file bytes into rows.  Never raises for bad file content.

    Raises UnsupportedFileKindError if `file_kind` is not a known kind;
    callers reject those before reading the file.
    """
    extractor = get_extractor(file_kind)

    if not data:
        return ParseResult.failed("File is empty")

    try:
        table = extractor.extract(data)
    except ExtractionError as exc:
        logger.warning("File extraction failed", file_kind=str(file_kind), error=str(exc))
        return ParseResult.failed(str(exc))

    if not table.columns:
        return ParseResult.failed("File is empty")

    try:
        column_map = resolve_columns(table.columns)
    except ColumnMappingError as exc:
        return ParseResult.failed(str(exc))

    if not table.rows:
        return ParseResult.failed(MSG_NO_DATA_ROWS)

    rows = [
        _build_row(row_number, table.columns, values, column_map)
        for row_number, values in enumerate(table.rows, start=1)
    ]

    logger.info(
        "Price file parsed",
        file_kind=str(file_kind),
        total_rows=len(rows),
        rows_with_warnings=sum(1 for r in rows if r.parse_warnings),
    )
    return ParseResult(rows=rows)


def _build_row(
    row_number: int,
    columns: list[str],
    values: list,
    column_map: ColumnMap,
) -> ParsedRow:
    """Build one ParsedRow; short rows are padded with blank cells.

    Named columns are always kept in the raw data.  Non-blank cells under
    a blank or repeated header, or past the last header, are kept too,
    keyed `column_<n>` by their 1-based position.
    """
    padded = list(values) + [None] * (len(columns) - len(values))

    raw: dict[str, str] = {}
    for index, value in enumerate(padded):
        key = columns[index].strip() if index < len(columns) else ""
        if key and key not in raw:
            raw[key] = cell_to_text(value)
        elif cell_to_text(value).strip():
            raw[f"column_{index + 1}"] = cell_to_text(value)

    price, warning = parse_price(padded[column_map.price_index])
    normalized = NormalizedPrice(
        sku=normalize_sku(padded[column_map.sku_index]),
        new_price=price,
    )
    return ParsedRow.build(
        row_number=row_number,
        raw=raw,
        normalized=normalized,
        parse_warnings=[warning] if warning else None,
    )
