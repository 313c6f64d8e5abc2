# Shared pytest fixtures
from __future__ import annotations

import copy
import io
import tempfile
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from center_import.models.config_models import ImportConfig
from center_import.models.entities import (
    Center,
    Group,
    Payment,
    PaymentKey,
    PaymentStatus,
    Subject,
    User,
    UserRole,
)
from center_import.services.passwords import PasswordHasher

CENTER_ID = 1
OTHER_CENTER_ID = 2


class InMemoryRepository:
    """Repository double with the PgCenterRepository method set.

    begin() snapshots the whole store and rollback() restores it, so tests can
    assert on atomicity. Reads hand out copies, like rows fetched from a DB.
    """

    def __init__(self) -> None:
        self.centers: dict[int, Center] = {}
        self.subjects: dict[int, Subject] = {}
        self.users: dict[int, User] = {}
        self.groups: dict[int, Group] = {}
        self.group_students: set[tuple[int, int]] = set()
        self.payments: dict[int, Payment] = {}
        self._next_id = 100
        self._snapshot: tuple | None = None
        self.calls: Counter[str] = Counter()

    # -- helpers ---------------------------------------------------------
    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _state(self) -> tuple:
        return (
            self.centers,
            self.subjects,
            self.users,
            self.groups,
            self.group_students,
            self.payments,
            self._next_id,
        )

    @property
    def in_transaction(self) -> bool:
        return self._snapshot is not None

    # -- seeding ---------------------------------------------------------
    def add_center(self, center_id: int, name: str = "Center", is_active: bool = True) -> Center:
        self.centers[center_id] = Center(id=center_id, name=name, is_active=is_active)
        return self.centers[center_id]

    def add_user(
        self,
        username: str,
        role: UserRole,
        center_id: int | None = CENTER_ID,
        first_name: str = "First",
        last_name: str = "Last",
        phone: str | None = None,
        password: str = "hash",
    ) -> User:
        user = User(
            id=self._new_id(),
            username=username,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            center_id=center_id,
        )
        self.users[user.id] = user
        return user

    def add_subject(self, name: str, center_id: int = CENTER_ID) -> Subject:
        subject = Subject(id=self._new_id(), name=name, center_id=center_id)
        self.subjects[subject.id] = subject
        return subject

    def add_group(self, name: str, teacher: User, center_id: int = CENTER_ID, **fields) -> Group:
        group = Group(
            id=self._new_id(),
            name=name,
            center_id=center_id,
            teacher_id=teacher.id,
            start_time=fields.pop("start_time", "08:00"),
            end_time=fields.pop("end_time", "09:00"),
            **fields,
        )
        self.groups[group.id] = group
        return group

    def user(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def group(self, name: str) -> Group | None:
        return next((g for g in self.groups.values() if g.name.lower() == name.lower()), None)

    # -- unit of work ----------------------------------------------------
    def begin(self) -> None:
        self.calls["begin"] += 1
        self._snapshot = copy.deepcopy(self._state())

    def commit(self) -> None:
        self.calls["commit"] += 1
        self._snapshot = None

    def rollback(self) -> None:
        self.calls["rollback"] += 1
        if self._snapshot is not None:
            (
                self.centers,
                self.subjects,
                self.users,
                self.groups,
                self.group_students,
                self.payments,
                self._next_id,
            ) = self._snapshot
        self._snapshot = None

    # -- repository contract --------------------------------------------
    def get_center(self, center_id: int) -> Center | None:
        self.calls["get_center"] += 1
        return copy.deepcopy(self.centers.get(center_id))

    def list_subjects(self, center_id: int) -> list[Subject]:
        self.calls["list_subjects"] += 1
        return [copy.deepcopy(s) for s in self.subjects.values() if s.center_id == center_id]

    def create_subject(self, center_id: int, name: str) -> Subject:
        self.calls["create_subject"] += 1
        return copy.deepcopy(self.add_subject(name, center_id))

    def find_users(self, usernames: Iterable[str], role: UserRole | None = None) -> list[User]:
        self.calls["find_users"] += 1
        wanted = set(usernames)
        return [
            copy.deepcopy(u)
            for u in self.users.values()
            if u.username in wanted and (role is None or u.role is role)
        ]

    def find_user(self, username: str, role: UserRole | None = None) -> User | None:
        self.calls["find_user"] += 1
        found = self.user(username)
        if found is None or (role is not None and found.role is not role):
            return None
        return copy.deepcopy(found)

    def create_user(self, **fields) -> User:
        self.calls["create_user"] += 1
        user = User(id=self._new_id(), **fields)
        self.users[user.id] = user
        return copy.deepcopy(user)

    def update_user(self, user: User) -> User:
        self.calls["update_user"] += 1
        self.users[user.id] = copy.deepcopy(user)
        return user

    def find_group(self, center_id: int, name: str) -> Group | None:
        self.calls["find_group"] += 1
        for g in self.groups.values():
            if g.center_id == center_id and g.name.lower() == name.lower():
                return copy.deepcopy(g)
        return None

    def find_groups(self, center_id: int, names: Iterable[str]) -> list[Group]:
        self.calls["find_groups"] += 1
        lowered = {n.lower() for n in names}
        return [
            copy.deepcopy(g)
            for g in self.groups.values()
            if g.center_id == center_id and g.name.lower() in lowered
        ]

    def create_group(self, **fields) -> Group:
        self.calls["create_group"] += 1
        group = Group(id=self._new_id(), **fields)
        self.groups[group.id] = group
        return copy.deepcopy(group)

    def update_group(self, group: Group) -> Group:
        self.calls["update_group"] += 1
        self.groups[group.id] = copy.deepcopy(group)
        return group

    def has_group_student(self, group_id: int, student_id: int) -> bool:
        return (group_id, student_id) in self.group_students

    def add_group_student(self, group_id: int, student_id: int) -> None:
        self.calls["add_group_student"] += 1
        self.group_students.add((group_id, student_id))

    def find_payment(self, key: PaymentKey) -> Payment | None:
        self.calls["find_payment"] += 1
        for p in self.payments.values():
            if p.key == key:
                return copy.deepcopy(p)
        return None

    def create_payment(self, **fields) -> Payment:
        self.calls["create_payment"] += 1
        payment = Payment(id=self._new_id(), **fields)
        self.payments[payment.id] = payment
        return copy.deepcopy(payment)

    def add_payment(
        self,
        student: User,
        group: Group,
        due_date: date,
        amount: str,
        description: str,
        status: PaymentStatus = PaymentStatus.PENDING,
        paid_date: datetime | None = None,
    ) -> Payment:
        payment = Payment(
            id=self._new_id(),
            amount=Decimal(amount),
            status=status,
            due_date=due_date,
            paid_date=paid_date,
            description=description,
            student_id=student.id,
            group_id=group.id,
            teacher_id=group.teacher_id,
        )
        self.payments[payment.id] = payment
        return payment


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def repo() -> InMemoryRepository:
    """Center 1 (active) with teacher t1; center 2 with teacher t9."""
    r = InMemoryRepository()
    r.add_center(CENTER_ID, "Center A")
    r.add_center(OTHER_CENTER_ID, "Center B")
    r.add_user("t1", UserRole.TEACHER, CENTER_ID)
    r.add_user("t9", UserRole.TEACHER, OTHER_CENTER_ID)
    return r


@pytest.fixture()
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture()
def config() -> ImportConfig:
    return ImportConfig(password_rounds=4)


def build_workbook(sheets: dict[str, list[list[object]]]) -> bytes:
    """Create .xlsx bytes; the first list of each sheet is its header row."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return buffer.getvalue()


@pytest.fixture()
def make_workbook() -> Callable[[dict[str, list[list[object]]]], bytes]:
    return build_workbook


GROUP_HEADER = ["name", "teacherUsername", "daysOfWeek", "startTime", "endTime", "description", "subjectName"]
STUDENT_HEADER = ["username", "password", "firstName", "lastName", "phone", "groupName"]
PAYMENT_HEADER = ["studentUsername", "groupName", "amount", "dueDate", "status", "paidDate", "description"]


@pytest.fixture()
def clean_workbook_sheets() -> dict[str, list[list[object]]]:
    return {
        "Groups": [
            GROUP_HEADER,
            ["Algebra-1", "t1", "", "09:00", "10:30", "", ""],
        ],
        "Students": [
            STUDENT_HEADER,
            ["s1", "", "Ali", "Vali", "", "Algebra-1"],
        ],
        "Payments": [
            PAYMENT_HEADER,
            ["s1", "Algebra-1", 150000, "2025-01-10", "", "", ""],
        ],
    }
