"""Domain models for the sales ledger comparer.

This package contains all domain model classes used throughout the application:
the column layout of a snapshot, normalized rows, comparison results and the
configuration objects.
"""

from .column_map import TRACKED_FIELDS, ColumnMap, SemanticField
from .comparison_result import ComparisonDiff, ComparisonResult, ComparisonRun, FieldChange
from .config_models import CompareConfig, SummaryConfig
from .sale_row import SaleRow
from .snapshot import Snapshot

__all__ = [
    # Layout
    "ColumnMap",
    "SemanticField",
    "TRACKED_FIELDS",
    # Rows
    "SaleRow",
    "Snapshot",
    # Results
    "ComparisonDiff",
    "ComparisonResult",
    "ComparisonRun",
    "FieldChange",
    # Configuration models
    "CompareConfig",
    "SummaryConfig",
]
