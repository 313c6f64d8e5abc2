from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowData model for the center workbook importer.

RowData represents a single data row of a located worksheet, keyed by the raw
header text exactly as it appears in the sheet. Values are left untyped here;
the coercion layer in center_import.excel.cells turns them into strings,
numbers and dates before any business rule reads them.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """One data row of a worksheet (header row excluded).

    row_number is 1-based and relative to the first data row, so the row
    directly below the header is row 1. Blank cells hold "" rather than None.
    """
    row_number: int  # 1 = first row below the header
    values: dict[str, Any]  # Raw header -> cell value, source column order
