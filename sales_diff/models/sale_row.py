from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .column_map import ColumnMap, SemanticField

"""SaleRow model for the sales ledger comparer.

SaleRow represents a single ledger row after normalization: the identity-bearing
fields are extracted up front, while the raw cells and the column map of the
snapshot the row came from are kept so tracked fields can be re-derived later
without re-reading the file.
"""

__all__ = [
    "SaleRow",
]


@dataclass(frozen=True)
class SaleRow:
    """Logical representation of a single ledger row after normalization.

    row_number refers to the 1-based row number in the source sheet.
    """
    row_number: int  # Sheet row number (1-based)
    id: str  # Formatted identifier, never empty
    project_name: str  # Empty for aggregate/subtotal rows
    customer: str
    raw: tuple[Any, ...]  # Original cell values in sheet column order
    column_map: ColumnMap  # Header layout of the snapshot this row belongs to

    def cell(self, field: SemanticField) -> Any:
        """Return the raw cell for a semantic field, or None if unmapped or out of range."""
        idx = self.column_map.index_of(field)
        if idx is None or idx >= len(self.raw):
            return None
        return self.raw[idx]

    @property
    def date(self) -> Any:
        return self.cell(SemanticField.DATE)

    @property
    def status(self) -> Any:
        return self.cell(SemanticField.STATUS)

    @property
    def product(self) -> Any:
        return self.cell(SemanticField.PRODUCT)

    @property
    def qty_pc(self) -> Any:
        return self.cell(SemanticField.QTY_PC)

    @property
    def qty_kw(self) -> Any:
        return self.cell(SemanticField.QTY_KW)

    @property
    def is_subtotal(self) -> bool:
        """Aggregate/subtotal lines carry no project name."""
        return self.project_name == ""
