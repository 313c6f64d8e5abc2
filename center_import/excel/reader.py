from __future__ import annotations

import io
from collections.abc import Iterable, Sequence

import pandas as pd

from ..models.row_data import RowData
from .cells import is_blank

"""Workbook reader, sheet locator and row reader.

The workbook arrives as raw bytes (an uploaded .xlsx/.xls). Sheets are read
with pandas using the first row as header and dtype=object, so cell values
keep the Python type openpyxl produced (int stays int, dates stay datetimes)
and the coercion layer sees what the author typed.
"""


class WorkbookReadError(Exception):
    """Raised when the bytes cannot be parsed as a spreadsheet workbook."""


def read_workbook(data: bytes, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read a workbook buffer returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    data: workbook file content
    target_sheets: restrict parsing to these sheet names (None = all sheets)
    """
    if not data:
        raise WorkbookReadError("workbook is empty (0 bytes)")
    try:
        xls = pd.ExcelFile(io.BytesIO(data))
    except Exception as e:
        raise WorkbookReadError(f"cannot read workbook (expected .xlsx/.xls): {e}") from e

    wanted = set(target_sheets) if target_sheets is not None else None
    frames: dict[str, pd.DataFrame] = {}
    with xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            try:
                # "NA" / "null" are legitimate text in these sheets; keep them as strings
                frames[str(name)] = xls.parse(name, header=0, dtype=object, keep_default_na=False)
            except Exception as e:
                raise WorkbookReadError(f"cannot read sheet '{name}': {e}") from e
    return frames


def find_sheet_name(sheet_names: Sequence[str], candidates: Iterable[str]) -> str | None:
    """Locate a sheet by case-insensitive exact name match.

    The first candidate present wins; None when no candidate matches.
    """
    lower: dict[str, str] = {}
    for name in sheet_names:
        lower.setdefault(str(name).lower(), str(name))
    for candidate in candidates:
        found = lower.get(candidate.lower())
        if found is not None:
            return found
    return None


def read_sheet_rows(df: pd.DataFrame) -> list[RowData]:
    """Convert a sheet DataFrame into RowData records.

    Blank cells become "" so downstream coercion always sees a defined value.
    Fully blank rows are skipped, but numbering still counts them so that
    row_number points at the same line the operator sees below the header.
    """
    columns = [str(c).strip() for c in df.columns]
    rows: list[RowData] = []
    for position, raw in enumerate(df.itertuples(index=False, name=None), start=1):
        values = {col: ("" if is_blank(val) else val) for col, val in zip(columns, raw, strict=False)}
        if all(is_blank(v) for v in values.values()):
            continue
        rows.append(RowData(row_number=position, values=values))
    return rows
