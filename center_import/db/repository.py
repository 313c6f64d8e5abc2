from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import psycopg2

from ..models.entities import (
    Center,
    Group,
    Payment,
    PaymentKey,
    PaymentStatus,
    Subject,
    User,
    UserRole,
)

"""PostgreSQL persistence layer for the importer.

PgCenterRepository issues plain SQL through a single psycopg2 cursor. The
cursor must return mapping rows (psycopg2.extras.RealDictCursor) and its
connection should run in autocommit mode: transaction boundaries are the
explicit BEGIN / COMMIT / ROLLBACK statements sent by begin(), commit() and
rollback(), so the unit of work is visible in the orchestrator.

Table and column names follow the application schema (camelCase, quoted).
"""

_USER_COLUMNS = 'id, username, password, "firstName", "lastName", phone, role, "centerId", "isActive"'
_GROUP_COLUMNS = (
    'id, name, description, "centerId", "teacherId", "subjectId", '
    '"daysOfWeek", "startTime", "endTime"'
)
_PAYMENT_COLUMNS = (
    'id, amount, status, "dueDate", "paidDate", description, '
    '"studentId", "groupId", "teacherId"'
)


class RepositoryError(Exception):
    """Raised when a database statement fails."""


def _user_from_row(row: Mapping[str, Any]) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        password=row["password"],
        first_name=row["firstName"],
        last_name=row["lastName"],
        phone=row["phone"],
        role=UserRole(row["role"]),
        center_id=row["centerId"],
        is_active=row["isActive"],
    )


def _group_from_row(row: Mapping[str, Any]) -> Group:
    return Group(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        center_id=row["centerId"],
        teacher_id=row["teacherId"],
        subject_id=row["subjectId"],
        days_of_week=list(row["daysOfWeek"] or []),
        start_time=row["startTime"],
        end_time=row["endTime"],
    )


def _payment_from_row(row: Mapping[str, Any]) -> Payment:
    return Payment(
        id=row["id"],
        amount=Decimal(row["amount"]),
        status=PaymentStatus(row["status"]),
        due_date=row["dueDate"],
        paid_date=row["paidDate"],
        description=row["description"],
        student_id=row["studentId"],
        group_id=row["groupId"],
        teacher_id=row["teacherId"],
    )


class PgCenterRepository:
    """Tenant-scoped find / create / update operations over one cursor."""

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    # -- low level ---------------------------------------------------------
    def _execute(self, sql: str, params: tuple[Any, ...] | None = None) -> None:
        try:
            self.cursor.execute(sql, params)
        except psycopg2.Error as e:
            raise RepositoryError(f"{type(e).__name__}: {e}".strip()) from e

    def _fetchone(self, sql: str, params: tuple[Any, ...]) -> Mapping[str, Any] | None:
        self._execute(sql, params)
        return self.cursor.fetchone()

    def _fetchall(self, sql: str, params: tuple[Any, ...]) -> list[Mapping[str, Any]]:
        self._execute(sql, params)
        return list(self.cursor.fetchall())

    def _insert_returning_id(self, sql: str, params: tuple[Any, ...]) -> int:
        row = self._fetchone(sql + " RETURNING id", params)
        if row is None:
            raise RepositoryError("INSERT did not return an id")
        return row["id"]

    # -- unit of work ------------------------------------------------------
    def begin(self) -> None:
        self._execute("BEGIN")

    def commit(self) -> None:
        self._execute("COMMIT")

    def rollback(self) -> None:
        self._execute("ROLLBACK")

    # -- centers / subjects ------------------------------------------------
    def get_center(self, center_id: int) -> Center | None:
        row = self._fetchone('SELECT id, name, "isActive" FROM centers WHERE id = %s', (center_id,))
        if row is None:
            return None
        return Center(id=row["id"], name=row["name"], is_active=row["isActive"])

    def list_subjects(self, center_id: int) -> list[Subject]:
        rows = self._fetchall(
            'SELECT id, name, description, "centerId" FROM subjects WHERE "centerId" = %s ORDER BY id',
            (center_id,),
        )
        return [
            Subject(id=r["id"], name=r["name"], center_id=r["centerId"], description=r["description"])
            for r in rows
        ]

    def create_subject(self, center_id: int, name: str) -> Subject:
        new_id = self._insert_returning_id(
            'INSERT INTO subjects (name, description, "centerId") VALUES (%s, %s, %s)',
            (name, None, center_id),
        )
        return Subject(id=new_id, name=name, center_id=center_id)

    # -- users -------------------------------------------------------------
    def find_users(self, usernames: Iterable[str], role: UserRole | None = None) -> list[User]:
        names = sorted(set(usernames))
        if not names:
            return []
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE username = ANY(%s)"
        params: tuple[Any, ...] = (names,)
        if role is not None:
            sql += " AND role = %s"
            params += (role.value,)
        return [_user_from_row(r) for r in self._fetchall(sql, params)]

    def find_user(self, username: str, role: UserRole | None = None) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE username = %s"
        params: tuple[Any, ...] = (username,)
        if role is not None:
            sql += " AND role = %s"
            params += (role.value,)
        row = self._fetchone(sql + " LIMIT 1", params)
        return _user_from_row(row) if row is not None else None

    def create_user(
        self,
        *,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str | None,
        role: UserRole,
        center_id: int,
        is_active: bool = True,
    ) -> User:
        new_id = self._insert_returning_id(
            'INSERT INTO users (username, password, "firstName", "lastName", phone, role, "centerId", "isActive") '
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
            (username, password, first_name, last_name, phone, role.value, center_id, is_active),
        )
        return User(
            id=new_id,
            username=username,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            center_id=center_id,
            is_active=is_active,
        )

    def update_user(self, user: User) -> User:
        self._execute(
            'UPDATE users SET "firstName" = %s, "lastName" = %s, phone = %s, password = %s WHERE id = %s',
            (user.first_name, user.last_name, user.phone, user.password, user.id),
        )
        return user

    # -- groups ------------------------------------------------------------
    def find_group(self, center_id: int, name: str) -> Group | None:
        row = self._fetchone(
            f'SELECT {_GROUP_COLUMNS} FROM "groups" '
            'WHERE "centerId" = %s AND lower(name) = lower(%s) ORDER BY id LIMIT 1',
            (center_id, name),
        )
        return _group_from_row(row) if row is not None else None

    def find_groups(self, center_id: int, names: Iterable[str]) -> list[Group]:
        lowered = sorted({n.lower() for n in names})
        if not lowered:
            return []
        rows = self._fetchall(
            f'SELECT {_GROUP_COLUMNS} FROM "groups" '
            'WHERE "centerId" = %s AND lower(name) = ANY(%s) ORDER BY id',
            (center_id, lowered),
        )
        return [_group_from_row(r) for r in rows]

    def create_group(
        self,
        *,
        name: str,
        center_id: int,
        teacher_id: int,
        subject_id: int | None,
        description: str | None,
        days_of_week: list[str],
        start_time: str,
        end_time: str,
    ) -> Group:
        new_id = self._insert_returning_id(
            'INSERT INTO "groups" (name, description, "centerId", "teacherId", "subjectId", '
            '"daysOfWeek", "startTime", "endTime") VALUES (%s, %s, %s, %s, %s, %s, %s, %s)',
            (name, description, center_id, teacher_id, subject_id, list(days_of_week), start_time, end_time),
        )
        return Group(
            id=new_id,
            name=name,
            center_id=center_id,
            teacher_id=teacher_id,
            subject_id=subject_id,
            description=description,
            days_of_week=list(days_of_week),
            start_time=start_time,
            end_time=end_time,
        )

    def update_group(self, group: Group) -> Group:
        self._execute(
            'UPDATE "groups" SET description = %s, "teacherId" = %s, "subjectId" = %s, '
            '"daysOfWeek" = %s, "startTime" = %s, "endTime" = %s WHERE id = %s',
            (
                group.description,
                group.teacher_id,
                group.subject_id,
                list(group.days_of_week),
                group.start_time,
                group.end_time,
                group.id,
            ),
        )
        return group

    def has_group_student(self, group_id: int, student_id: int) -> bool:
        row = self._fetchone(
            'SELECT 1 AS present FROM group_students WHERE "groupId" = %s AND "studentId" = %s',
            (group_id, student_id),
        )
        return row is not None

    def add_group_student(self, group_id: int, student_id: int) -> None:
        self._execute(
            'INSERT INTO group_students ("groupId", "studentId") VALUES (%s, %s)',
            (group_id, student_id),
        )

    # -- payments ----------------------------------------------------------
    def find_payment(self, key: PaymentKey) -> Payment | None:
        row = self._fetchone(
            f"SELECT {_PAYMENT_COLUMNS} FROM payments "
            'WHERE "studentId" = %s AND "groupId" = %s AND "dueDate" = %s '
            "AND amount = %s AND description = %s ORDER BY id LIMIT 1",
            (key.student_id, key.group_id, key.due_date, key.amount, key.description),
        )
        return _payment_from_row(row) if row is not None else None

    def create_payment(
        self,
        *,
        amount: Decimal,
        status: PaymentStatus,
        due_date: date,
        paid_date: datetime | None,
        description: str,
        student_id: int,
        group_id: int,
        teacher_id: int,
    ) -> Payment:
        new_id = self._insert_returning_id(
            'INSERT INTO payments (amount, status, "dueDate", "paidDate", description, '
            '"studentId", "groupId", "teacherId") VALUES (%s, %s, %s, %s, %s, %s, %s, %s)',
            (amount, status.value, due_date, paid_date, description, student_id, group_id, teacher_id),
        )
        return Payment(
            id=new_id,
            amount=amount,
            status=status,
            due_date=due_date,
            paid_date=paid_date,
            description=description,
            student_id=student_id,
            group_id=group_id,
            teacher_id=teacher_id,
        )
