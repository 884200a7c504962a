from __future__ import annotations

import logging
import zipfile
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import HeaderNotFoundError, parse_snapshot
from ..logging.error_log import ErrorLogBuffer
from ..models.comparison_result import ComparisonRun
from ..models.config_models import CompareConfig
from ..models.error_record import ErrorRecord
from ..models.snapshot import Snapshot
from .diff_engine import compare_snapshots

logger = logging.getLogger(__name__)

"""Service orchestration for a baseline/updated comparison.

Flow:
1. Parse the baseline workbook, then the updated workbook (first sheet each)
2. Record rows dropped for a missing identifier in the error log
3. Run the diff engine and return the result with both snapshots and timing

A file whose header cannot be located stops the run (ComparisonError);
row-level problems never do.
"""


class ComparisonError(Exception):
    """Fatal error for a comparison run (unreadable file, header not found)."""


def _load_snapshot(path: Path, config: CompareConfig, error_log: ErrorLogBuffer) -> Snapshot:
    if not path.is_file():
        raise ComparisonError(f"file not found: {path}")
    try:
        snapshot = parse_snapshot(path, config)
    except HeaderNotFoundError as e:
        error_log.append(ErrorRecord.header_not_found(path.name, str(e)))
        raise ComparisonError(str(e)) from e
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        # pandas は壊れた/非対応ファイルで ValueError 系を投げる
        raise ComparisonError(f"cannot read {path.name}: {e}") from e

    for row_number in snapshot.dropped_rows:
        error_log.append(ErrorRecord.identity_missing(snapshot.file_name, snapshot.sheet_name, row_number))
    if snapshot.dropped_rows:
        logger.warning(f"{snapshot.file_name}: {len(snapshot.dropped_rows)} row(s) without identifier skipped")
    logger.info(
        f"{snapshot.file_name}: sheet='{snapshot.sheet_name}' header_row={snapshot.header_row} rows={len(snapshot)}"
    )
    return snapshot


def compare_files(
    baseline: Path,
    updated: Path,
    config: CompareConfig,
    error_log: ErrorLogBuffer | None = None,
) -> ComparisonRun:
    """Parse both workbooks and compare them.

    Args:
        baseline: Older ledger export
        updated: Newer ledger export
        config: Header labels and display settings
        error_log: Buffer receiving file/row level error records (caller flushes)

    Returns:
        ComparisonRun with the result, both snapshots and timing

    Raises:
        ComparisonError: a file is missing, unreadable, or has no header row
    """
    start_time = datetime.now(UTC)
    if error_log is None:
        error_log = ErrorLogBuffer()

    old = _load_snapshot(baseline, config, error_log)
    new = _load_snapshot(updated, config, error_log)

    result = compare_snapshots(
        old.rows,
        new.rows,
        tracked_labels=config.tracked_labels,
        empty_value=config.empty_value,
    )

    end_time = datetime.now(UTC)
    return ComparisonRun(
        baseline=old,
        updated=new,
        result=result,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
