from __future__ import annotations

from ..models.comparison_result import ComparisonRun

"""Summary line rendering service.

Format:
SUMMARY baseline_rows={n} updated_rows={n} added={n} removed={n} modified={n}
dropped_rows={n} elapsed_sec={elapsed}

dropped_rows is the total over both snapshots of non-blank rows skipped for a
missing identifier.
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{seconds:.6f}".rstrip('0').rstrip('.')
    return str(round(seconds, 3))


def render_summary_line(run: ComparisonRun) -> str:
    """Render a SUMMARY line for a finished comparison.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from sales_diff.models import ColumnMap, ComparisonResult, Snapshot
        >>> snap = Snapshot("a.xlsx", "S", 1, ColumnMap(id=0), rows=())
        >>> t = datetime(2026, 1, 1, tzinfo=timezone.utc)
        >>> run = ComparisonRun(snap, snap, ComparisonResult(), t, t, 0.0)
        >>> render_summary_line(run)
        'SUMMARY baseline_rows=0 updated_rows=0 added=0 removed=0 modified=0 dropped_rows=0 elapsed_sec=0'
    """
    counts = run.result.counts
    dropped = len(run.baseline.dropped_rows) + len(run.updated.dropped_rows)
    return (
        f"SUMMARY baseline_rows={len(run.baseline)} "
        f"updated_rows={len(run.updated)} "
        f"added={counts['added']} "
        f"removed={counts['removed']} "
        f"modified={counts['modified']} "
        f"dropped_rows={dropped} "
        f"elapsed_sec={_format_seconds(run.elapsed_seconds)}"
    )
