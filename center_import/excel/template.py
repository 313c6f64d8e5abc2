from __future__ import annotations

import io

import pandas as pd

"""Blank import template.

Produces an .xlsx with the three sheets the importer understands, canonical
headers and one example row each. Operators download it, replace the
example rows and upload it back.
"""

TEMPLATE_SHEETS: dict[str, list[dict[str, object]]] = {
    "Groups": [
        {
            "name": "G1 Matematika",
            "description": "",
            "subjectName": "Matematika",
            "teacherUsername": "teacher1",
            "daysOfWeek": "monday,wednesday,friday",
            "startTime": "14:00",
            "endTime": "16:00",
        }
    ],
    "Students": [
        {
            "username": "student1",
            "password": "lms1234",
            "firstName": "Ali",
            "lastName": "Valiyev",
            "phone": "+998901234567",
            "groupName": "G1 Matematika",
        }
    ],
    "Payments": [
        {
            "studentUsername": "student1",
            "groupName": "G1 Matematika",
            "amount": 300000,
            "dueDate": "2026-01-10",
            "status": "pending",
            "paidDate": "",
            "description": "Yanvar oylik to'lovi",
        }
    ],
}


def build_template_workbook() -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, rows in TEMPLATE_SHEETS.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()
