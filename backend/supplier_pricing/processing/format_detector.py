"""
Format Detector — maps an upload to its declared file kind.
"""

from __future__ import annotations

import os

from supplier_pricing.core.constants import EXTENSION_FILE_KINDS, FileKind
from supplier_pricing.pipeline.errors import UnsupportedFileKindError


def detect_file_kind(filename: str) -> FileKind:
    """Return the file kind for an upload name, based on its extension.

    Raises UnsupportedFileKindError for anything other than .csv/.xlsx/.xls.
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in EXTENSION_FILE_KINDS:
        raise UnsupportedFileKindError(ext or filename)
    return EXTENSION_FILE_KINDS[ext]


def coerce_file_kind(value: str) -> FileKind:
    """Validate a declared file kind string against the closed enumeration."""
    try:
        return FileKind(value)
    except ValueError:
        raise UnsupportedFileKindError(value) from None
