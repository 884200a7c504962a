from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.column_map import ColumnMap, SemanticField
from ..models.sale_row import SaleRow
from .normalize import is_blank, to_display_string

"""Row normalizer: raw sheet row + ColumnMap -> SaleRow.

Rows without an identifier are padding or free-text lines and are discarded
(the caller decides whether to count them). Subtotal lines are kept; they are
recognized later by their empty project name.
"""

__all__ = [
    "cell_at",
    "is_blank_row",
    "normalize_row",
]


def cell_at(raw: Sequence[Any], index: int | None) -> Any:
    """Cell at index, or None when the column is unmapped or the row is short."""
    if index is None or index >= len(raw):
        return None
    return raw[index]


def is_blank_row(raw: Sequence[Any]) -> bool:
    return all(is_blank(v) for v in raw)


def normalize_row(raw: Sequence[Any], column_map: ColumnMap, row_number: int) -> SaleRow | None:
    """Build a SaleRow, or return None when the identifier is empty.

    The identifier keeps its display form (date serials become YYYY/MM/DD,
    text is trimmed); identity keys are derived from it later by
    normalize_for_comparison.
    """
    row_id = to_display_string(cell_at(raw, column_map.id))
    if not row_id:
        return None

    return SaleRow(
        row_number=row_number,
        id=row_id,
        project_name=to_display_string(cell_at(raw, column_map.index_of(SemanticField.PROJECT))),
        customer=to_display_string(cell_at(raw, column_map.index_of(SemanticField.CUSTOMER))),
        raw=tuple(raw),
        column_map=column_map,
    )
