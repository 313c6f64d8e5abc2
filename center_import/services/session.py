from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..models.config_models import ImportConfig
from ..models.entities import Center
from ..models.error_record import RowError
from ..models.import_result import ImportSummary
from .passwords import PasswordHasher
from .resolution import GroupCache, StudentCache, SubjectCache, TeacherCache

"""Import session: the state one import call threads through its phases.

The session owns the resolution caches, the summary counters and the ordered
error list. It is created inside the unit of work and dropped afterwards;
nothing here is module level, so concurrent imports never share a cache.
"""

logger = logging.getLogger(__name__)


@dataclass
class ImportSession:
    center: Center
    repository: Any  # PgCenterRepository or any object with the same methods
    hasher: PasswordHasher
    config: ImportConfig
    summary: ImportSummary = field(default_factory=ImportSummary)
    errors: list[RowError] = field(default_factory=list)
    subjects: SubjectCache = field(init=False)
    teachers: TeacherCache = field(init=False)
    groups: GroupCache = field(init=False)
    students: StudentCache = field(init=False)

    def __post_init__(self) -> None:
        self.subjects = SubjectCache(self.repository, self.center.id)
        self.teachers = TeacherCache(self.repository)
        self.groups = GroupCache(self.repository, self.center.id)
        self.students = StudentCache(self.repository)

    @property
    def center_id(self) -> int:
        return self.center.id

    def add_error(self, sheet: str, row: int, message: str) -> None:
        logger.warning("%s row %d: %s", sheet, row, message)
        self.errors.append(RowError(sheet=sheet, row=row, message=message))
