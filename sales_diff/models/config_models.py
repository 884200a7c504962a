from __future__ import annotations

from dataclasses import dataclass, field

from .column_map import SemanticField

"""Config dataclasses for the sales ledger comparer.

Defaults reproduce the layout of the ledger exports the tool was written for
(Traditional Chinese headers). Every value can be overridden from
config/compare.yml; see sales_diff/config/loader.py.
"""

__all__ = [
    "DEFAULT_HEADER_LABELS",
    "DEFAULT_TRACKED_LABELS",
    "EMPTY_VALUE",
    "SUBTOTAL_LABEL",
    "HEADER_SCAN_LIMIT",
    "SummaryConfig",
    "CompareConfig",
]

# Header text searched for (substring, case/whitespace-insensitive)
DEFAULT_HEADER_LABELS: dict[SemanticField, str] = {
    SemanticField.ID: "編號",
    SemanticField.DATE: "日",
    SemanticField.STATUS: "狀態",
    SemanticField.PRODUCT: "產品",
    SemanticField.QTY_PC: "Qtypc",
    SemanticField.QTY_KW: "QtykW",
    SemanticField.PROJECT: "案名",
    SemanticField.CUSTOMER: "客戶",
}

# FieldChange.column に出す表示名
DEFAULT_TRACKED_LABELS: dict[SemanticField, str] = {
    SemanticField.DATE: "日",
    SemanticField.STATUS: "狀態",
    SemanticField.PRODUCT: "產品",
    SemanticField.QTY_PC: "Qty pc",
    SemanticField.QTY_KW: "Qty kW",
}

EMPTY_VALUE = "(empty)"
SUBTOTAL_LABEL = "aggregate/subtotal row"
HEADER_SCAN_LIMIT = 100


@dataclass(frozen=True)
class SummaryConfig:
    """Settings for the optional natural-language summary."""
    model: str = "gpt-4o-mini"
    max_changes: int = 15  # Modified entries quoted in the prompt
    language: str = "Traditional Chinese"


@dataclass(frozen=True)
class CompareConfig:
    """Root configuration object for a comparison run."""
    header_labels: dict[SemanticField, str] = field(default_factory=lambda: dict(DEFAULT_HEADER_LABELS))
    tracked_labels: dict[SemanticField, str] = field(default_factory=lambda: dict(DEFAULT_TRACKED_LABELS))
    empty_value: str = EMPTY_VALUE
    subtotal_label: str = SUBTOTAL_LABEL
    header_scan_limit: int = HEADER_SCAN_LIMIT
    summary: SummaryConfig = field(default_factory=SummaryConfig)
