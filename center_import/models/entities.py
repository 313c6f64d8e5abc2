from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

"""Persistent entities touched by the workbook import.

These mirror the rows of the centers / subjects / users / groups / payments
tables. They are owned by the persistence layer; the importer only reads them,
mutates the fields it is allowed to overwrite and hands them back for update.
"""


class UserRole(Enum):
    TEACHER = "teacher"
    STUDENT = "student"
    SUPERADMIN = "superadmin"
    ADMIN = "admin"


class PaymentStatus(Enum):
    """Payment lifecycle status.

    Values match the database enum. Unknown spreadsheet input falls back to
    PENDING (see PaymentStatus.parse).
    """
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, raw: str | None) -> PaymentStatus:
        if raw:
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.PENDING


@dataclass
class Center:
    id: int
    name: str
    is_active: bool = True


@dataclass
class Subject:
    id: int
    name: str
    center_id: int
    description: str | None = None


@dataclass
class User:
    """A teacher or student account (single users table)."""
    id: int
    username: str
    password: str  # bcrypt hash
    first_name: str
    last_name: str
    role: UserRole
    center_id: int | None
    phone: str | None = None
    is_active: bool = True


@dataclass
class Group:
    id: int
    name: str
    center_id: int
    teacher_id: int
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    subject_id: int | None = None
    description: str | None = None
    days_of_week: list[str] = field(default_factory=list)  # e.g. ["monday", "wednesday"]


@dataclass(frozen=True)
class PaymentKey:
    """Natural key used to detect an already imported payment.

    status is not part of the key: a payment whose status was
    changed elsewhere is neither duplicated nor updated by a re-import.
    """
    student_id: int
    group_id: int
    due_date: date
    amount: Decimal
    description: str


@dataclass
class Payment:
    id: int
    amount: Decimal
    status: PaymentStatus
    due_date: date
    description: str
    student_id: int
    group_id: int
    teacher_id: int
    paid_date: datetime | None = None

    @property
    def key(self) -> PaymentKey:
        return PaymentKey(
            student_id=self.student_id,
            group_id=self.group_id,
            due_date=self.due_date,
            amount=self.amount,
            description=self.description,
        )
