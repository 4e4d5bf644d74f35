from __future__ import annotations

import pytest

from supplier_pricing.core.constants import FileKind
from supplier_pricing.pipeline.errors import UnsupportedFileKindError
from supplier_pricing.processing.format_detector import coerce_file_kind, detect_file_kind


@pytest.mark.parametrize(
    "filename, kind",
    [
        ("prices.csv", FileKind.DELIMITED_TEXT),
        ("PRICES.CSV", FileKind.DELIMITED_TEXT),
        ("prices.xlsx", FileKind.SPREADSHEET),
        ("legacy.xls", FileKind.SPREADSHEET),
    ],
)
def test_detect_file_kind(filename, kind):
    assert detect_file_kind(filename) == kind


@pytest.mark.parametrize("filename", ["prices.pdf", "prices", "prices.csv.txt"])
def test_detect_file_kind_rejects_other_extensions(filename):
    with pytest.raises(UnsupportedFileKindError):
        detect_file_kind(filename)


def test_coerce_file_kind():
    assert coerce_file_kind("spreadsheet") is FileKind.SPREADSHEET
    with pytest.raises(UnsupportedFileKindError, match="Unsupported file kind: xml"):
        coerce_file_kind("xml")
