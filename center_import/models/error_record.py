from __future__ import annotations

import json
from dataclasses import asdict, dataclass

"""RowError model for row-level import problems.

A RowError names the logical sheet, the 1-based data row and a human readable
message. Row errors are collected, never raised: one import attempt reports
every problem in the workbook at once.
"""

__all__ = [
    "RowError",
]


@dataclass(frozen=True)
class RowError:
    """Structured row-level error.

    Attributes:
        sheet: Sheet name as found in the workbook (or the logical default)
        row: Data row number (1-based, relative to the first data row)
        message: Description of the problem
    """
    sheet: str
    row: int
    message: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    def to_json_line(self) -> str:
        """Serialize the error to a single JSON Lines record (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
