"""Center workbook importer.

Merges a groups / students / payments spreadsheet into one center's records,
all-or-nothing, with a row-addressable error report.
"""

from .models import ImportResult, ImportSummary, RowError
from .services.orchestrator import (
    CenterInactiveError,
    CenterNotFoundError,
    EmptyWorkbookError,
    InvalidWorkbookError,
    ProcessingError,
    import_workbook,
)

__all__ = [
    "import_workbook",
    "ImportResult",
    "ImportSummary",
    "RowError",
    "ProcessingError",
    "CenterNotFoundError",
    "CenterInactiveError",
    "InvalidWorkbookError",
    "EmptyWorkbookError",
]
