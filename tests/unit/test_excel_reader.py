from __future__ import annotations

import pandas as pd
import pytest

from center_import.excel.reader import (
    WorkbookReadError,
    find_sheet_name,
    read_sheet_rows,
    read_workbook,
)


def test_read_workbook_returns_frames_per_sheet(make_workbook):
    data = make_workbook({
        "Groups": [["name", "startTime"], ["G1", "09:00"]],
        "Other": [["x"], [1]],
    })
    frames = read_workbook(data)
    assert set(frames) == {"Groups", "Other"}
    assert list(frames["Groups"].columns) == ["name", "startTime"]
    assert frames["Other"].iloc[0, 0] == 1


def test_read_workbook_target_sheets(make_workbook):
    data = make_workbook({"A": [["h"], ["v"]], "B": [["h"], ["v"]]})
    frames = read_workbook(data, target_sheets=["B"])
    assert list(frames) == ["B"]


def test_read_workbook_keeps_na_strings(make_workbook):
    # "NA" and "null" stay literal strings
    data = make_workbook({"S": [["code"], ["NA"], ["null"]]})
    frames = read_workbook(data)
    assert frames["S"]["code"].tolist() == ["NA", "null"]


def test_read_workbook_rejects_garbage():
    with pytest.raises(WorkbookReadError):
        read_workbook(b"definitely not a spreadsheet")


def test_read_workbook_rejects_empty_bytes():
    with pytest.raises(WorkbookReadError, match="empty"):
        read_workbook(b"")


def test_find_sheet_name_case_insensitive_first_candidate_wins():
    names = ["guruhlar", "GROUPS"]
    assert find_sheet_name(names, ["Groups", "Guruhlar"]) == "GROUPS"
    assert find_sheet_name(names, ["Guruhlar", "Groups"]) == "guruhlar"
    assert find_sheet_name(names, ["Payments"]) is None


def test_find_sheet_name_exact_match_only():
    assert find_sheet_name(["Groups 2025"], ["Groups"]) is None


def test_read_sheet_rows_numbering_and_blank_rows():
    df = pd.DataFrame(
        [
            {"name": "G1", "teacher": "t1"},
            {"name": "", "teacher": None},
            {"name": "G3", "teacher": float("nan")},
        ]
    )
    rows = read_sheet_rows(df)
    assert [r.row_number for r in rows] == [1, 3]
    assert rows[0].values == {"name": "G1", "teacher": "t1"}
    # empty cells normalize to ""
    assert rows[1].values["teacher"] == ""


def test_read_sheet_rows_strips_header_whitespace():
    df = pd.DataFrame([{" name ": "G1"}])
    rows = read_sheet_rows(df)
    assert list(rows[0].values) == ["name"]


def test_read_sheet_rows_empty_frame():
    assert read_sheet_rows(pd.DataFrame(columns=["name"])) == []
