from __future__ import annotations

import json
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from center_import.models import (
    ImportResult,
    ImportSummary,
    Payment,
    PaymentKey,
    PaymentStatus,
    RowData,
    RowError,
)
from center_import.services.passwords import PasswordHasher


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("paid", PaymentStatus.PAID),
        (" PAID ", PaymentStatus.PAID),
        ("Overdue", PaymentStatus.OVERDUE),
        ("cancelled", PaymentStatus.CANCELLED),
        ("pending", PaymentStatus.PENDING),
        ("to'langan", PaymentStatus.PENDING),
        ("", PaymentStatus.PENDING),
        (None, PaymentStatus.PENDING),
    ],
)
def test_payment_status_parse(raw, expected):
    assert PaymentStatus.parse(raw) is expected


def test_row_error_json_line():
    err = RowError(sheet="To'lovlar", row=3, message="student not found: s1")
    assert json.loads(err.to_json_line()) == {"sheet": "To'lovlar", "row": 3, "message": "student not found: s1"}
    assert err.to_dict() == {"sheet": "To'lovlar", "row": 3, "message": "student not found: s1"}


def test_row_error_and_row_data_are_frozen():
    err = RowError("Groups", 1, "x")
    with pytest.raises(FrozenInstanceError):
        err.row = 2  # type: ignore[misc]
    row = RowData(row_number=1, values={})
    with pytest.raises(FrozenInstanceError):
        row.row_number = 5  # type: ignore[misc]


def test_import_result_committed_flag_and_dict():
    ok = ImportResult(summary=ImportSummary(groups_created=1))
    assert ok.committed
    assert ok.as_dict()["summary"]["groups_created"] == 1
    assert ok.as_dict()["errors"] == []

    failed = ImportResult(summary=ImportSummary(), errors=[RowError("Groups", 1, "x")])
    assert not failed.committed
    assert failed.as_dict()["errors"] == [{"sheet": "Groups", "row": 1, "message": "x"}]


def test_payment_key_ignores_status():
    common = dict(
        amount=Decimal("10.00"),
        due_date=date(2025, 1, 1),
        description="d",
        student_id=1,
        group_id=2,
        teacher_id=3,
    )
    a = Payment(id=1, status=PaymentStatus.PAID, **common)
    b = Payment(id=2, status=PaymentStatus.PENDING, **common)
    assert a.key == b.key
    assert a.key == PaymentKey(1, 2, date(2025, 1, 1), Decimal("10"), "d")


def test_password_hasher_roundtrip():
    hasher = PasswordHasher(rounds=4)
    hashed = hasher.hash("lms1234")
    assert hashed.startswith("$2b$04$")
    assert hasher.verify("lms1234", hashed)
    assert not hasher.verify("wrong", hashed)
