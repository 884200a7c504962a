from __future__ import annotations

from dataclasses import dataclass

from .column_map import ColumnMap
from .sale_row import SaleRow

"""Snapshot model: one parsed ledger export (baseline or updated)."""

__all__ = [
    "Snapshot",
]


@dataclass(frozen=True)
class Snapshot:
    """Parsed rows of a single spreadsheet file.

    Produced once per parse and never modified afterwards.
    """
    file_name: str
    sheet_name: str
    header_row: int  # 1-based sheet row holding the header
    column_map: ColumnMap
    rows: tuple[SaleRow, ...]
    dropped_rows: tuple[int, ...] = ()  # Non-blank rows without an identifier

    def __len__(self) -> int:
        return len(self.rows)
