from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..models.column_map import ColumnMap, SemanticField
from ..models.config_models import DEFAULT_HEADER_LABELS
from .normalize import normalize_label

"""Column resolver: header row -> ColumnMap.

Headers drift between ledger versions ("Qty pc" vs "Qty\\npc", "編 號" vs "編號"),
so each semantic field is located by fuzzy substring matching: the first header
cell whose normalized, case-folded text contains the normalized label wins.
"""

__all__ = [
    "find_column_index",
    "resolve_columns",
]


def find_column_index(headers: Sequence[Any], label: str) -> int | None:
    """Return the position of the first header containing label, or None."""
    target = normalize_label(label)
    for idx, header in enumerate(headers):
        if target in normalize_label(header):
            return idx
    return None


def resolve_columns(
    headers: Sequence[Any],
    labels: Mapping[SemanticField, str] | None = None,
) -> ColumnMap:
    """Map every semantic field to its column position in headers.

    Args:
        headers: Header row cells in sheet order
        labels: Label searched for each field (defaults to the ledger's headers)

    Returns:
        ColumnMap with None for fields whose label matched no header
    """
    labels = labels or DEFAULT_HEADER_LABELS
    positions: dict[str, int | None] = {}
    for field in SemanticField:
        label = labels.get(field)
        positions[field.value] = find_column_index(headers, label) if label else None
    return ColumnMap(**positions)
