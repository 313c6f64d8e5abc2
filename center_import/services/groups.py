from __future__ import annotations

import logging
import re

from ..excel import columns
from ..excel.cells import as_string
from ..excel.headers import pick
from ..models.row_data import RowData
from .progress import PhaseProgress
from .session import ImportSession

"""Groups phase: upsert groups by (name, center).

Runs first: students and payments reference groups by name. Per row the
teacher must already exist in the center; the subject is created on first
use. Existing groups always take the new teacher and times, while
description, subject and days are only replaced when the row provides them.
"""

logger = logging.getLogger(__name__)

_DAY_SEPARATORS = re.compile(r"[,\s]+")


def split_days(raw: str | None) -> list[str]:
    """Split "Mon, wed  fri" into ["mon", "wed", "fri"] (lower-cased, de-duplicated)."""
    days: list[str] = []
    for part in _DAY_SEPARATORS.split(raw or ""):
        day = part.strip().lower()
        if day and day not in days:
            days.append(day)
    return days


def teacher_usernames(rows: list[RowData]) -> set[str]:
    names = set()
    for row in rows:
        username = as_string(pick(row.values, columns.GROUP_TEACHER))
        if username:
            names.add(username)
    return names


def process_groups(
    session: ImportSession,
    sheet: str,
    rows: list[RowData],
    progress: PhaseProgress | None = None,
) -> None:
    session.subjects.preload()
    session.teachers.preload(teacher_usernames(rows))

    for row in rows:
        _process_group_row(session, sheet, row)
        if progress is not None:
            progress.advance(errors=len(session.errors))


def _process_group_row(session: ImportSession, sheet: str, row: RowData) -> None:
    values = row.values
    name = as_string(pick(values, columns.GROUP_NAME))
    teacher_username = as_string(pick(values, columns.GROUP_TEACHER))
    days = split_days(as_string(pick(values, columns.GROUP_DAYS)))
    start_time = as_string(pick(values, columns.GROUP_START))
    end_time = as_string(pick(values, columns.GROUP_END))
    description = as_string(pick(values, columns.GROUP_DESCRIPTION))
    subject_name = as_string(pick(values, columns.GROUP_SUBJECT))

    if not name:
        session.add_error(sheet, row.row_number, "group name is required")
        return
    if not teacher_username:
        session.add_error(sheet, row.row_number, "teacherUsername is required")
        return
    if not start_time or not end_time:
        session.add_error(sheet, row.row_number, "startTime and endTime are required")
        return

    teacher = session.teachers.get(teacher_username)
    if teacher is None:
        session.add_error(sheet, row.row_number, f"teacher not found: {teacher_username}")
        return
    if teacher.center_id != session.center_id:
        session.add_error(
            sheet, row.row_number, f"teacher belongs to another center: {teacher_username}"
        )
        return

    subject_id = None
    if subject_name:
        subject, created = session.subjects.get_or_create(subject_name)
        if created:
            session.summary.subjects_created += 1
        subject_id = subject.id

    repo = session.repository
    group = session.groups.resolve(name)
    if group is None:
        group = repo.create_group(
            name=name,
            center_id=session.center_id,
            teacher_id=teacher.id,
            subject_id=subject_id,
            description=description,
            days_of_week=days,
            start_time=start_time,
            end_time=end_time,
        )
        session.summary.groups_created += 1
        logger.debug("group created: %s (id=%s)", group.name, group.id)
    else:
        group.teacher_id = teacher.id
        group.start_time = start_time
        group.end_time = end_time
        if description:
            group.description = description
        if subject_id is not None:
            group.subject_id = subject_id
        if days:
            group.days_of_week = days
        group = repo.update_group(group)
        session.summary.groups_updated += 1
        logger.debug("group updated: %s (id=%s)", group.name, group.id)
    session.groups.put(group)
