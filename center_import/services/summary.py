from __future__ import annotations

from ..models.import_result import ImportResult

"""Summary line rendering for the importer CLI.

Format:
SUMMARY committed={true|false} subjects_created={n} groups_created={n}
groups_updated={n} students_created={n} students_updated={n}
links_created={n} payments_created={n} payments_skipped={n} errors={n}
"""


def render_summary_line(result: ImportResult) -> str:
    """Render a single SUMMARY line from an ImportResult.

    Examples:
        >>> from center_import.models import ImportResult, ImportSummary
        >>> render_summary_line(ImportResult(summary=ImportSummary(groups_created=1)))  # doctest: +ELLIPSIS
        'SUMMARY committed=true subjects_created=0 groups_created=1 ...'
    """
    s = result.summary
    return (
        f"SUMMARY committed={'true' if result.committed else 'false'} "
        f"subjects_created={s.subjects_created} "
        f"groups_created={s.groups_created} "
        f"groups_updated={s.groups_updated} "
        f"students_created={s.students_created} "
        f"students_updated={s.students_updated} "
        f"links_created={s.student_group_links_created} "
        f"payments_created={s.payments_created} "
        f"payments_skipped={s.payments_skipped} "
        f"errors={len(result.errors)}"
    )
