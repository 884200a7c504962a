from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Semantic fields and per-snapshot column index table.

A ledger export may move columns around between versions, so every snapshot
carries its own ColumnMap resolved from its own header row. Comparisons
always locate a value through the map of the side it belongs to.
"""

__all__ = [
    "SemanticField",
    "ColumnMap",
    "TRACKED_FIELDS",
]


class SemanticField(Enum):
    """Ledger columns the comparer knows about.

    - ID: row identifier (identity key source)
    - DATE / STATUS / PRODUCT / QTY_PC / QTY_KW: tracked fields
    - PROJECT / CUSTOMER: display-only fields
    """
    ID = "id"
    DATE = "date"
    STATUS = "status"
    PRODUCT = "product"
    QTY_PC = "qty_pc"
    QTY_KW = "qty_kw"
    PROJECT = "project"
    CUSTOMER = "customer"


# 比較順序 = 出力順序 (列順ではない)
TRACKED_FIELDS: tuple[SemanticField, ...] = (
    SemanticField.DATE,
    SemanticField.STATUS,
    SemanticField.PRODUCT,
    SemanticField.QTY_PC,
    SemanticField.QTY_KW,
)


@dataclass(frozen=True)
class ColumnMap:
    """Column positions (0-based) for one snapshot's header layout.

    None means the header was not found; it is never an error by itself.
    """
    id: int | None = None
    date: int | None = None
    status: int | None = None
    product: int | None = None
    qty_pc: int | None = None
    qty_kw: int | None = None
    project: int | None = None
    customer: int | None = None

    def index_of(self, field: SemanticField) -> int | None:
        return getattr(self, field.value)

    def has(self, field: SemanticField) -> bool:
        return self.index_of(field) is not None

    @property
    def missing_fields(self) -> list[SemanticField]:
        return [f for f in SemanticField if not self.has(f)]
