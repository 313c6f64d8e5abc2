from __future__ import annotations

import logging

from ..excel import columns
from ..excel.cells import as_string
from ..excel.headers import pick
from ..models.entities import User, UserRole
from ..models.row_data import RowData
from .progress import PhaseProgress
from .session import ImportSession

"""Students phase: upsert student accounts by username and link them to groups.

Existing accounts are only touched when they are students of the importing
center; anything else is reported and left as is. A failed group link is a
row error but the student upsert on that row still counts.
"""

logger = logging.getLogger(__name__)


def process_students(
    session: ImportSession,
    sheet: str,
    rows: list[RowData],
    progress: PhaseProgress | None = None,
) -> None:
    usernames = [as_string(pick(r.values, columns.STUDENT_USERNAME)) for r in rows]
    session.students.preload(u for u in usernames if u)

    for row in rows:
        _process_student_row(session, sheet, row)
        if progress is not None:
            progress.advance(errors=len(session.errors))


def _process_student_row(session: ImportSession, sheet: str, row: RowData) -> None:
    values = row.values
    username = as_string(pick(values, columns.STUDENT_USERNAME))
    password = as_string(pick(values, columns.STUDENT_PASSWORD))
    first_name = as_string(pick(values, columns.STUDENT_FIRST_NAME))
    last_name = as_string(pick(values, columns.STUDENT_LAST_NAME))
    phone = as_string(pick(values, columns.STUDENT_PHONE))
    group_name = as_string(pick(values, columns.STUDENT_GROUP))

    if not username:
        session.add_error(sheet, row.row_number, "username is required")
        return
    if not first_name or not last_name:
        session.add_error(sheet, row.row_number, "firstName and lastName are required")
        return

    student = _upsert_student(session, sheet, row, username, password, first_name, last_name, phone)
    if student is None or not group_name:
        return

    group = session.groups.resolve(group_name)
    if group is None:
        session.add_error(sheet, row.row_number, f"group not found: {group_name}")
        return
    repo = session.repository
    if not repo.has_group_student(group.id, student.id):
        repo.add_group_student(group.id, student.id)
        session.summary.student_group_links_created += 1
        logger.debug("linked %s -> %s", student.username, group.name)


def _upsert_student(
    session: ImportSession,
    sheet: str,
    row: RowData,
    username: str,
    password: str | None,
    first_name: str,
    last_name: str,
    phone: str | None,
) -> User | None:
    repo = session.repository
    existing = session.students.get(username)
    if existing is None:
        student = repo.create_user(
            username=username,
            password=session.hasher.hash(password or session.config.default_student_password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=UserRole.STUDENT,
            center_id=session.center_id,
            is_active=True,
        )
        session.summary.students_created += 1
        session.students.put(student)
        return student

    if existing.role is not UserRole.STUDENT:
        session.add_error(
            sheet, row.row_number, f"username is not a student: {username} ({existing.role.value})"
        )
        return None
    if existing.center_id != session.center_id:
        session.add_error(sheet, row.row_number, f"student belongs to another center: {username}")
        return None

    existing.first_name = first_name
    existing.last_name = last_name
    if phone:
        existing.phone = phone
    if password:
        existing.password = session.hasher.hash(password)
    student = repo.update_user(existing)
    session.summary.students_updated += 1
    session.students.put(student)
    return student
