from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from .sale_row import SaleRow
from .snapshot import Snapshot

"""Comparison result models for the sales ledger comparer.

The diff engine hands a ComparisonResult to rendering/export collaborators.
All containers are tuples so that two comparisons never share mutable state;
the optional summary text is attached by building a new instance.
"""

__all__ = [
    "FieldChange",
    "ComparisonDiff",
    "ComparisonResult",
    "ComparisonRun",
]


@dataclass(frozen=True)
class FieldChange:
    """Old/new normalized values of one tracked field."""
    column: str  # Display label of the tracked field
    old_value: str
    new_value: str


@dataclass(frozen=True)
class ComparisonDiff:
    """One modified row, matched by identity key across both snapshots."""
    unique_key: str  # Normalized identity key
    id: str  # Identifier as formatted in the updated snapshot
    project_name: str
    customer: str
    changes: tuple[FieldChange, ...]

    @property
    def is_subtotal(self) -> bool:
        return self.project_name == ""


@dataclass(frozen=True)
class ComparisonResult:
    """Three-way partition of a comparison: added / removed / modified.

    Rows matched without any tracked-field change appear in none of them.
    """
    added: tuple[SaleRow, ...] = ()
    removed: tuple[SaleRow, ...] = ()
    modified: tuple[ComparisonDiff, ...] = ()
    summary: str | None = None

    def with_summary(self, summary: str) -> ComparisonResult:
        """Return a copy carrying the given summary text."""
        return replace(self, summary=summary)

    @property
    def has_differences(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "added": len(self.added),
            "removed": len(self.removed),
            "modified": len(self.modified),
        }


@dataclass(frozen=True)
class ComparisonRun:
    """A comparison together with the snapshots it was computed from."""
    baseline: Snapshot
    updated: Snapshot
    result: ComparisonResult
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float  # end - start

    def with_result(self, result: ComparisonResult) -> ComparisonRun:
        return replace(self, result=result)
