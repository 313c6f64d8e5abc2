from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any

import pandas as pd

"""Cell coercion layer.

Spreadsheet cells arrive as whatever the workbook author typed: strings,
ints, floats, datetimes, times or blanks. The functions here turn them into
trimmed strings, finite numbers and dates, returning None for anything that
is absent or unparseable. None of them raise on bad input.
"""

__all__ = [
    "is_blank",
    "as_string",
    "as_number",
    "parse_date",
]

# Day 25569 of the spreadsheet serial calendar is 1970-01-01
EXCEL_EPOCH_OFFSET_DAYS = 25569
_UNIX_EPOCH = datetime(1970, 1, 1)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DMY_DATE = re.compile(r"^(\d{1,2})[./](\d{1,2})[./](\d{4})$")
_NON_NUMERIC = re.compile(r"[^\d.]")


def is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, float) and math.isnan(v):
        return True
    if v is pd.NaT:
        return True
    return isinstance(v, str) and not v.strip()


def as_string(v: Any) -> str | None:
    """Return the trimmed text of a cell, or None when it is blank."""
    if is_blank(v):
        return None
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, float) and v.is_integer():
        # 998901234567.0 -> "998901234567"
        return str(int(v))
    if isinstance(v, time):
        return v.strftime("%H:%M")
    if isinstance(v, datetime):
        if v.time() == time(0, 0):
            return v.date().isoformat()
        return v.isoformat(sep=" ")
    if isinstance(v, date):
        return v.isoformat()
    s = str(v).strip()
    return s or None


def as_number(v: Any) -> float | None:
    """Return a finite number for a cell, or None.

    Strings lose every character that is not a digit or a dot before parsing,
    so "150,000", "150 000" and "150000 so'm" all read as 150000.
    """
    if is_blank(v) or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        n = float(v)
        return n if math.isfinite(n) else None
    cleaned = _NON_NUMERIC.sub("", str(v))
    if not cleaned:
        return None
    try:
        n = float(cleaned)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def _from_serial(serial: float) -> datetime | None:
    try:
        return _UNIX_EPOCH + timedelta(days=serial - EXCEL_EPOCH_OFFSET_DAYS)
    except (OverflowError, ValueError):
        return None


def _safe_datetime(year: int, month: int, day: int) -> datetime | None:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def parse_date(v: Any) -> datetime | None:
    """Best-effort date parsing for spreadsheet cells.

    Accepts, in order:
    1. native datetime / date / pandas Timestamp values
    2. spreadsheet serial day numbers (45726 -> 2025-03-10)
    3. ISO ``YYYY-MM-DD`` strings
    4. ``DD.MM.YYYY`` and ``DD/MM/YYYY`` strings
    5. anything pandas.to_datetime understands, as a last resort

    Returns a naive datetime, or None when nothing matched.
    """
    if is_blank(v) or isinstance(v, bool):
        return None
    if isinstance(v, pd.Timestamp):
        return v.to_pydatetime().replace(tzinfo=None)
    if isinstance(v, datetime):
        return v.replace(tzinfo=None)
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    if isinstance(v, (int, float)):
        if not math.isfinite(v):
            return None
        return _from_serial(float(v))

    s = str(v).strip()
    m = _ISO_DATE.match(s)
    if m:
        return _safe_datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    m = _DMY_DATE.match(s)
    if m:
        return _safe_datetime(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    try:
        parsed = pd.to_datetime(s, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.to_pydatetime().replace(tzinfo=None)
