from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum

import pandas as pd

from ..models.column_map import SemanticField
from ..models.comparison_result import ComparisonDiff, ComparisonResult
from ..models.config_models import DEFAULT_TRACKED_LABELS, SUBTOTAL_LABEL
from ..models.sale_row import SaleRow
from .normalize import to_display_string

"""Report projection: ComparisonResult -> flat records, one per diff entry.

Record order is modified, added, removed (each in result order). Rendering
and file export are left to the caller; report_frame() hands the records over
as a DataFrame with a fixed column order.
"""

__all__ = [
    "ChangeKind",
    "ReportRecord",
    "REPORT_COLUMNS",
    "describe_changes",
    "describe_added",
    "build_report_records",
    "report_frame",
]

# 新規行の明細に出す項目 (Qty kW は出さない)
ADDED_DETAIL_FIELDS: tuple[SemanticField, ...] = (
    SemanticField.DATE,
    SemanticField.STATUS,
    SemanticField.PRODUCT,
    SemanticField.QTY_PC,
)
REMOVED_DETAIL = "Removed from updated snapshot"
REPORT_COLUMNS = ["kind", "id", "project_name", "customer", "details"]


class ChangeKind(Enum):
    MODIFIED = "modified"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ReportRecord:
    kind: ChangeKind
    id: str
    project_name: str
    customer: str
    details: str

    def as_dict(self) -> dict[str, str]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


def describe_changes(diff: ComparisonDiff) -> str:
    """'[field]: old -> new' for every change, joined with ' ; '."""
    return " ; ".join(f"[{c.column}]: {c.old_value} -> {c.new_value}" for c in diff.changes)


def describe_added(row: SaleRow, tracked_labels: Mapping[SemanticField, str] | None = None) -> str:
    tracked_labels = tracked_labels or DEFAULT_TRACKED_LABELS
    parts = [
        f"[{tracked_labels.get(field, field.value)}: {to_display_string(row.cell(field))}]"
        for field in ADDED_DETAIL_FIELDS
        if row.column_map.has(field)
    ]
    return " ".join(["Added:", *parts])


def _project_label(project_name: str, subtotal_label: str) -> str:
    return project_name or subtotal_label


def build_report_records(
    result: ComparisonResult,
    *,
    tracked_labels: Mapping[SemanticField, str] | None = None,
    subtotal_label: str = SUBTOTAL_LABEL,
) -> list[ReportRecord]:
    """Project a result into one record per modified/added/removed entry."""
    records: list[ReportRecord] = []
    for diff in result.modified:
        records.append(
            ReportRecord(
                kind=ChangeKind.MODIFIED,
                id=diff.id,
                project_name=_project_label(diff.project_name, subtotal_label),
                customer=diff.customer,
                details=describe_changes(diff),
            )
        )
    for row in result.added:
        records.append(
            ReportRecord(
                kind=ChangeKind.ADDED,
                id=row.id,
                project_name=_project_label(row.project_name, subtotal_label),
                customer=row.customer,
                details=describe_added(row, tracked_labels),
            )
        )
    for row in result.removed:
        records.append(
            ReportRecord(
                kind=ChangeKind.REMOVED,
                id=row.id,
                project_name=_project_label(row.project_name, subtotal_label),
                customer=row.customer,
                details=REMOVED_DETAIL,
            )
        )
    return records


def report_frame(records: list[ReportRecord]) -> pd.DataFrame:
    return pd.DataFrame([r.as_dict() for r in records], columns=REPORT_COLUMNS)
