from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from sales_diff.logging.error_log import ErrorLogBuffer
from sales_diff.models.config_models import CompareConfig
from sales_diff.services.orchestrator import compare_files
from sales_diff.services.report import REPORT_COLUMNS, build_report_records, report_frame

"""End-to-end comparison of two real ledger workbooks.

The updated export reorders its columns, spells headers differently
(extra spaces, line breaks) and adds a trailing note row; the comparison
has to line rows up by identifier regardless.
"""


@pytest.fixture
def ledger_pair(temp_workdir: Path, write_workbook, baseline_rows, updated_rows) -> tuple[Path, Path]:
    data_dir = temp_workdir / "data"
    old = write_workbook(data_dir / "2025-12.xlsx", {"Sales": baseline_rows, "Memo": [["ignored"]]})
    new = write_workbook(data_dir / "2026-01.xlsx", {"Sales": updated_rows})
    return old, new


def test_compare_with_column_drift(ledger_pair):
    old, new = ledger_pair
    buf = ErrorLogBuffer()
    run = compare_files(old, new, CompareConfig(), error_log=buf)

    assert run.baseline.header_row == 3
    assert run.updated.header_row == 2
    assert run.baseline.sheet_name == "Sales"
    assert len(run.baseline) == 4
    assert len(run.updated) == 4
    assert run.updated.dropped_rows == (7,)

    result = run.result
    assert [r.id for r in result.added] == ["B2"]
    assert [r.id for r in result.removed] == ["A3"]
    assert [d.id for d in result.modified] == ["A1", "S1"]

    a1, s1 = result.modified
    assert [(c.column, c.old_value, c.new_value) for c in a1.changes] == [("狀態", "Open", "Closed")]
    assert [(c.column, c.old_value, c.new_value) for c in s1.changes] == [
        ("Qty pc", "16", "13"),
        ("Qty kW", "8.5", "9.5"),
    ]
    assert s1.is_subtotal
    assert len(buf) == 1


def test_report_frame_from_real_run(ledger_pair):
    old, new = ledger_pair
    run = compare_files(old, new, CompareConfig())
    frame = report_frame(build_report_records(run.result))

    assert list(frame.columns) == REPORT_COLUMNS
    assert list(frame["kind"]) == ["modified", "modified", "added", "removed"]
    assert list(frame["id"]) == ["A1", "S1", "B2", "A3"]
    assert frame.loc[1, "project_name"] == "aggregate/subtotal row"
    added = frame.loc[2, "details"]
    assert added.startswith("Added:")
    assert "[日: 2026/01/08]" in added


def test_date_cells_compare_equal_across_representations(temp_workdir: Path, write_workbook):
    header = ["編號", "日", "狀態", "產品", "Qty pc", "Qty kW", "案名", "客戶"]
    old = write_workbook(
        temp_workdir / "data" / "old.xlsx",
        {"S": [header, ["D1", 46023, "Open", "Panel", 1, 1, "P", "C"]]},
    )
    new = write_workbook(
        temp_workdir / "data" / "new.xlsx",
        {"S": [header, ["D1", datetime(2026, 1, 1), "Open", "Panel", 1.0, "1", "P", "C"]]},
    )
    run = compare_files(old, new, CompareConfig())
    assert not run.result.has_differences


def test_duplicate_baseline_identifiers_last_wins(temp_workdir: Path, write_workbook):
    header = ["編號", "日", "狀態", "產品", "Qty pc", "Qty kW", "案名", "客戶"]
    old = write_workbook(
        temp_workdir / "data" / "old.xlsx",
        {
            "S": [
                header,
                ["X1", 46023, "Draft", "Panel", 1, 1, "P", "C"],
                ["X1", 46023, "Open", "Panel", 1, 1, "P", "C"],
            ]
        },
    )
    new = write_workbook(
        temp_workdir / "data" / "new.xlsx",
        {"S": [header, ["X1", 46023, "Open", "Panel", 1, 1, "P", "C"]]},
    )
    run = compare_files(old, new, CompareConfig())
    assert not run.result.has_differences
