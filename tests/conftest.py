# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from sales_diff.models.column_map import ColumnMap, SemanticField
from sales_diff.models.sale_row import SaleRow
from sales_diff.services.column_resolver import resolve_columns
from sales_diff.services.row_normalizer import normalize_row

LEDGER_HEADERS = ["編號", "日", "狀態", "產品", "Qty pc", "Qty kW", "案名", "客戶"]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def ledger_map() -> ColumnMap:
    return resolve_columns(LEDGER_HEADERS)


@pytest.fixture()
def make_row(ledger_map: ColumnMap):
    """Factory building a SaleRow through the row normalizer.

    Cells are placed according to column_map (default: the standard ledger
    layout). Returns None when the normalizer discards the row.
    """
    def _make(
        id: Any,
        *,
        date: Any = None,
        status: Any = None,
        product: Any = None,
        qty_pc: Any = None,
        qty_kw: Any = None,
        project: Any = "Solar Farm",
        customer: Any = "ACME",
        column_map: ColumnMap | None = None,
        row_number: int = 2,
    ) -> SaleRow | None:
        cmap = column_map or ledger_map
        values = {
            SemanticField.ID: id,
            SemanticField.DATE: date,
            SemanticField.STATUS: status,
            SemanticField.PRODUCT: product,
            SemanticField.QTY_PC: qty_pc,
            SemanticField.QTY_KW: qty_kw,
            SemanticField.PROJECT: project,
            SemanticField.CUSTOMER: customer,
        }
        width = max(i for i in (cmap.index_of(f) for f in SemanticField) if i is not None) + 1
        raw: list[Any] = [None] * width
        for field, value in values.items():
            idx = cmap.index_of(field)
            if idx is not None:
                raw[idx] = value
        return normalize_row(raw, cmap, row_number)
    return _make


@pytest.fixture()
def write_workbook():
    """Write sheets (name -> list of rows) to an .xlsx file without header inference."""
    def _write(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path) as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _write


@pytest.fixture()
def baseline_rows() -> list[list[object]]:
    return [
        ["2026 業務銷售表", None, None, None, None, None, None, None],
        [None, None, None, None, None, None, None, None],
        LEDGER_HEADERS,
        ["A1", 46023, "Open", "Panel", 10, 5.5, "Solar Farm", "ACME"],
        ["A2", 46024, "Open", "Inverter", 2, 1, "Roof Top", "Globex"],
        ["A3", 46025, "Closed", "Panel", 4, 2, "Warehouse", "Initech"],
        ["S1", None, None, None, 16, 8.5, None, None],
    ]


@pytest.fixture()
def updated_rows() -> list[list[object]]:
    # 列順変更 + 表記ゆれ (ヘッダの空白/改行, 値の空白)
    return [
        ["2026 業務銷售表 (更新)", None, None, None, None, None, None, None],
        ["客戶", "編 號", "案名", "日", "狀態", "產品", "Qty\npc", "Qty kW"],
        ["ACME", "A1 ", "Solar Farm", "2026/01/01", "Closed", "Panel", 10, 5.5],
        ["Globex", "A2", "Roof Top", 46024, "Open", "Inverter ", 2, 1],
        ["Umbrella", "B2", "Harbor", 46030, "Open", "Battery", 1, 3],
        [None, "S1", None, None, None, None, 13, 9.5],
        ["Note: figures are provisional", None, None, None, None, None, None, None],
    ]
