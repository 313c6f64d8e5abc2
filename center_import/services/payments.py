from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..excel import columns
from ..excel.cells import as_number, as_string, parse_date
from ..excel.headers import pick
from ..models.entities import PaymentKey, PaymentStatus
from ..models.row_data import RowData
from .progress import PhaseProgress
from .session import ImportSession

"""Payments phase: create payments that are not already recorded.

A payment is identified by (student, group, due date, amount, description).
Status is not part of that key, so a row whose payment already exists with a
different status is skipped rather than duplicated or updated.
"""

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def to_amount(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def process_payments(
    session: ImportSession,
    sheet: str,
    rows: list[RowData],
    progress: PhaseProgress | None = None,
) -> None:
    group_names = {as_string(pick(r.values, columns.PAYMENT_GROUP)) for r in rows}
    session.groups.preload(n for n in group_names if n)

    for row in rows:
        _process_payment_row(session, sheet, row)
        if progress is not None:
            progress.advance(errors=len(session.errors))


def _process_payment_row(session: ImportSession, sheet: str, row: RowData) -> None:
    values = row.values
    student_username = as_string(pick(values, columns.PAYMENT_STUDENT))
    group_name = as_string(pick(values, columns.PAYMENT_GROUP))
    amount_raw = pick(values, columns.PAYMENT_AMOUNT)
    amount = as_number(amount_raw)
    due_raw = pick(values, columns.PAYMENT_DUE_DATE)
    status = PaymentStatus.parse(as_string(pick(values, columns.PAYMENT_STATUS)))
    paid_raw = pick(values, columns.PAYMENT_PAID_DATE)
    description = (
        as_string(pick(values, columns.PAYMENT_DESCRIPTION))
        or session.config.default_payment_description
    )

    if not student_username or not group_name:
        session.add_error(sheet, row.row_number, "studentUsername and groupName are required")
        return
    if amount is None:
        session.add_error(sheet, row.row_number, "amount is required")
        return
    try:
        amount_value = to_amount(amount)
    except InvalidOperation:
        session.add_error(sheet, row.row_number, f"invalid amount: {as_string(amount_raw)}")
        return
    due = parse_date(due_raw)
    if due is None:
        session.add_error(sheet, row.row_number, f"invalid dueDate: {as_string(due_raw) or '(empty)'}")
        return
    due_date = due.date()

    student = session.students.resolve_student(student_username)
    if student is None:
        session.add_error(sheet, row.row_number, f"student not found: {student_username}")
        return
    if student.center_id != session.center_id:
        session.add_error(sheet, row.row_number, f"student belongs to another center: {student_username}")
        return

    group = session.groups.resolve(group_name)
    if group is None:
        session.add_error(sheet, row.row_number, f"group not found: {group_name}")
        return

    paid_date = None
    if status is PaymentStatus.PAID:
        paid_date = parse_date(paid_raw) or datetime.now(UTC).replace(tzinfo=None)

    repo = session.repository
    key = PaymentKey(
        student_id=student.id,
        group_id=group.id,
        due_date=due_date,
        amount=amount_value,
        description=description,
    )
    if repo.find_payment(key) is not None:
        session.summary.payments_skipped += 1
        logger.debug("payment already recorded, skipped: %s", key)
        return

    repo.create_payment(
        amount=key.amount,
        status=status,
        due_date=due_date,
        paid_date=paid_date,
        description=description,
        student_id=student.id,
        group_id=group.id,
        teacher_id=group.teacher_id,
    )
    session.summary.payments_created += 1
