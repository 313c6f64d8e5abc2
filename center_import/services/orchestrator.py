from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..excel.reader import WorkbookReadError, find_sheet_name, read_sheet_rows, read_workbook
from ..models.config_models import (
    DEFAULT_SHEET_LABELS,
    GROUPS,
    PAYMENTS,
    STUDENTS,
    ImportConfig,
)
from ..models.import_result import ImportResult, ImportSummary
from ..models.row_data import RowData
from .groups import process_groups
from .passwords import PasswordHasher
from .payments import process_payments
from .progress import PhaseProgress
from .session import ImportSession
from .students import process_students

"""Workbook import orchestration.

import_workbook() is the single entry point. It validates the center and the
workbook structure up front, then runs the Groups, Students and Payments
phases inside one unit of work on the repository:

- zero row errors        -> COMMIT, summary returned
- one or more row errors -> ROLLBACK, zeroed summary + every row error
- any exception          -> ROLLBACK, exception propagates
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Base exception for structural import failures (nothing was processed)."""


class CenterNotFoundError(ProcessingError):
    pass


class CenterInactiveError(ProcessingError):
    pass


class InvalidWorkbookError(ProcessingError):
    pass


class EmptyWorkbookError(ProcessingError):
    pass


@dataclass(frozen=True)
class LocatedSheet:
    """A logical sheet and the rows read from it (empty when not found)."""
    logical: str
    name: str | None
    rows: list[RowData]

    @property
    def label(self) -> str:
        return self.name or DEFAULT_SHEET_LABELS[self.logical]


_PHASES = (
    (GROUPS, process_groups),
    (STUDENTS, process_students),
    (PAYMENTS, process_payments),
)


def locate_sheets(workbook: bytes, config: ImportConfig) -> dict[str, LocatedSheet]:
    """Read the workbook and pick the groups / students / payments sheets.

    Raises:
        InvalidWorkbookError: the bytes are not a readable workbook
        EmptyWorkbookError: none of the three sheets exists, or all are empty
    """
    try:
        frames = read_workbook(workbook)
    except WorkbookReadError as e:
        raise InvalidWorkbookError(str(e)) from e

    sheet_names = list(frames.keys())
    located: dict[str, LocatedSheet] = {}
    for logical, _ in _PHASES:
        name = find_sheet_name(sheet_names, config.aliases_for(logical))
        rows = read_sheet_rows(frames[name]) if name is not None else []
        located[logical] = LocatedSheet(logical=logical, name=name, rows=rows)
        logger.debug("sheet %s -> %r (%d rows)", logical, name, len(rows))

    if all(s.name is None for s in located.values()):
        raise EmptyWorkbookError(
            f"no Groups/Students/Payments sheet found (sheets in workbook: {sheet_names})"
        )
    if not any(s.rows for s in located.values()):
        raise EmptyWorkbookError("workbook contains no data rows (check sheet names and headers)")
    return located


def import_workbook(
    center_id: int,
    workbook: bytes,
    repository: Any,
    *,
    config: ImportConfig | None = None,
    hasher: PasswordHasher | None = None,
) -> ImportResult:
    """Merge a groups / students / payments workbook into one center.

    Args:
        center_id: Target center (tenant) id
        workbook: Raw .xlsx/.xls content
        repository: Persistence handle (PgCenterRepository or compatible);
            its begin/commit/rollback delimit the unit of work
        config: Import settings (defaults when None)
        hasher: Password hasher for new/updated student credentials

    Returns:
        ImportResult; ``result.committed`` tells whether anything was kept

    Raises:
        ProcessingError: structural failure before any row was processed
    """
    config = config or ImportConfig()
    hasher = hasher or PasswordHasher(config.password_rounds)

    center = repository.get_center(center_id)
    if center is None:
        raise CenterNotFoundError(f"center not found: {center_id}")
    if not center.is_active:
        raise CenterInactiveError(f"center is inactive: {center_id}")

    sheets = locate_sheets(workbook, config)
    logger.info(
        "importing into center %s: groups=%d students=%d payments=%d rows",
        center_id,
        len(sheets[GROUPS].rows),
        len(sheets[STUDENTS].rows),
        len(sheets[PAYMENTS].rows),
    )

    repository.begin()
    try:
        session = ImportSession(center=center, repository=repository, hasher=hasher, config=config)
        for logical, process in _PHASES:
            sheet = sheets[logical]
            with PhaseProgress(len(sheet.rows), description=sheet.label) as progress:
                process(session, sheet.label, sheet.rows, progress)
    except Exception:
        logger.error("import aborted, rolling back center %s", center_id)
        try:
            repository.rollback()
        except Exception:
            # keep the original failure as the one that propagates
            logger.exception("rollback failed for center %s", center_id)
        raise

    if session.errors:
        repository.rollback()
        logger.warning(
            "import rolled back: %d row error(s), nothing was saved", len(session.errors)
        )
        return ImportResult(summary=ImportSummary(), errors=list(session.errors))

    repository.commit()
    logger.info("import committed for center %s", center_id)
    return ImportResult(summary=session.summary, errors=[])
