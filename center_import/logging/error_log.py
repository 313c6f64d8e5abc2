from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import RowError

"""Row error log buffering.

When an import is rolled back the operator needs the full list of row errors
to fix the workbook. The buffer collects RowError records and writes them as
JSON Lines to ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC), one file per run.
"""

__all__ = [
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for row errors. flush() appends JSON Lines to the log file.

    The file path is fixed on first access. Not thread safe (imports run serially).
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[RowError] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: RowError) -> None:
        self._records.append(record)

    def extend(self, records: list[RowError]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None if nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
