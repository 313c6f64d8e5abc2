from __future__ import annotations

from dataclasses import asdict, dataclass, field

from .error_record import RowError

"""Result models returned by the workbook import.

ImportSummary holds the per-phase counters; ImportResult pairs them with the
ordered list of row errors. The same shape is returned whether the import
committed or rolled back.
"""

__all__ = [
    "ImportSummary",
    "ImportResult",
]


@dataclass
class ImportSummary:
    """Counters accumulated while the phases run.

    Each counter is incremented exactly once per qualifying event and never
    decremented. A rolled back import reports a fresh (all zero) summary.
    """
    subjects_created: int = 0
    groups_created: int = 0
    groups_updated: int = 0
    students_created: int = 0
    students_updated: int = 0
    student_group_links_created: int = 0
    payments_created: int = 0
    payments_skipped: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class ImportResult:
    summary: ImportSummary
    errors: list[RowError] = field(default_factory=list)

    @property
    def committed(self) -> bool:
        """True when the import had no row errors and its changes were kept."""
        return not self.errors

    def as_dict(self) -> dict[str, object]:
        return {
            "summary": self.summary.as_dict(),
            "errors": [e.to_dict() for e in self.errors],
        }
