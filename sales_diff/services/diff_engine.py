from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..models.column_map import TRACKED_FIELDS, SemanticField
from ..models.comparison_result import ComparisonDiff, ComparisonResult, FieldChange
from ..models.config_models import DEFAULT_TRACKED_LABELS, EMPTY_VALUE
from ..models.sale_row import SaleRow
from .normalize import normalize_for_comparison

logger = logging.getLogger(__name__)

"""Diff engine: match two snapshots by identity key and classify every row.

Identity strategy: a single column. The key of a row is
normalize_for_comparison(row.id); project name and customer are display-only,
so renaming a project under the same identifier shows up as a matched row,
never as a removed + added pair.

Classification:
- new key not in baseline            -> added
- matched, >=1 tracked field differs -> modified
- matched, nothing differs           -> unchanged (not reported)
- baseline key never matched         -> removed

Ordering follows the input: added/modified in updated-row order, removed in
baseline-row order.
"""

__all__ = [
    "identity_key",
    "compare_rows",
    "compare_snapshots",
]


def identity_key(row: SaleRow) -> str:
    return normalize_for_comparison(row.id)


def compare_rows(
    old_row: SaleRow,
    new_row: SaleRow,
    tracked_labels: Mapping[SemanticField, str] | None = None,
    empty_value: str = EMPTY_VALUE,
) -> list[FieldChange]:
    """Compare the tracked fields of two matched rows.

    Each side reads its value through its own column map. A field missing from
    either map is skipped rather than reported.
    """
    tracked_labels = tracked_labels or DEFAULT_TRACKED_LABELS
    changes: list[FieldChange] = []
    for field in TRACKED_FIELDS:
        if not (old_row.column_map.has(field) and new_row.column_map.has(field)):
            continue
        old_value = normalize_for_comparison(old_row.cell(field))
        new_value = normalize_for_comparison(new_row.cell(field))
        if old_value != new_value:
            changes.append(
                FieldChange(
                    column=tracked_labels.get(field, field.value),
                    old_value=old_value or empty_value,
                    new_value=new_value or empty_value,
                )
            )
    return changes


def compare_snapshots(
    old_rows: Iterable[SaleRow],
    new_rows: Iterable[SaleRow],
    *,
    tracked_labels: Mapping[SemanticField, str] | None = None,
    empty_value: str = EMPTY_VALUE,
) -> ComparisonResult:
    """Compute the added / removed / modified partition of two snapshots.

    Args:
        old_rows: Baseline rows
        new_rows: Updated rows
        tracked_labels: Display label per tracked field, used in FieldChange.column
        empty_value: Shown instead of an empty normalized value

    Returns:
        A new ComparisonResult; nothing is shared with the inputs except the rows
    """
    old_by_key: dict[str, SaleRow] = {}
    duplicate_keys = 0
    for row in old_rows:
        key = identity_key(row)
        if not key:
            continue
        if key in old_by_key:
            duplicate_keys += 1
        # 重複キーは後勝ち
        old_by_key[key] = row
    if duplicate_keys:
        logger.warning(f"baseline has {duplicate_keys} duplicate identifier(s); last occurrence wins")

    added: list[SaleRow] = []
    modified: list[ComparisonDiff] = []
    matched_keys: set[str] = set()
    unchanged = 0

    for new_row in new_rows:
        key = identity_key(new_row)
        if not key:
            continue
        matched_keys.add(key)

        old_row = old_by_key.get(key)
        if old_row is None:
            added.append(new_row)
            continue

        changes = compare_rows(old_row, new_row, tracked_labels, empty_value)
        if not changes:
            unchanged += 1
            continue
        modified.append(
            ComparisonDiff(
                unique_key=key,
                id=new_row.id,
                project_name=new_row.project_name,
                customer=new_row.customer,
                changes=tuple(changes),
            )
        )

    removed = [row for key, row in old_by_key.items() if key not in matched_keys]

    logger.debug(
        f"diff: added={len(added)} removed={len(removed)} modified={len(modified)} unchanged={unchanged}"
    )
    return ComparisonResult(added=tuple(added), removed=tuple(removed), modified=tuple(modified))
