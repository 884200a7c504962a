from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.column_map import SemanticField
from ..models.config_models import CompareConfig
from ..models.snapshot import Snapshot
from ..services.column_resolver import resolve_columns
from ..services.normalize import normalize_label
from ..services.row_normalizer import is_blank_row, normalize_row

logger = logging.getLogger(__name__)

"""Spreadsheet reader for ledger exports.

The exports carry a free-form title block above the table, so the header row
is not at a fixed position: the first row (within the scan limit) containing
the identifier label is taken as the header, and every row below it is a
data row candidate.

Cells are read with pandas without any header inference (header=None); value
canonicalization happens later in services.normalize.
"""

__all__ = [
    "HeaderNotFoundError",
    "read_first_sheet",
    "find_header_row",
    "parse_rows",
    "parse_snapshot",
]


class HeaderNotFoundError(Exception):
    """Raised when no header row containing the identifier label is found."""

    def __init__(self, file_name: str, label: str, scan_limit: int) -> None:
        super().__init__(
            f"'{file_name}': header row with '{label}' not found in first {scan_limit} rows"
        )
        self.file_name = file_name
        self.label = label
        self.scan_limit = scan_limit


def read_first_sheet(path: Path) -> tuple[str, list[list[Any]]]:
    """Read the first worksheet of a workbook as raw cell rows.

    Returns:
        (sheet name, rows) where each row is a list of cell values; empty
        cells come back as NaN
    """
    with pd.ExcelFile(path) as xls:
        sheet_name = str(xls.sheet_names[0])
        df = xls.parse(xls.sheet_names[0], header=None)
    return sheet_name, [raw.tolist() for _, raw in df.iterrows()]


def find_header_row(rows: Sequence[Sequence[Any]], label: str, scan_limit: int) -> int | None:
    """Return the 0-based index of the first row with a cell containing label."""
    target = normalize_label(label)
    for idx, row in enumerate(rows[:scan_limit]):
        if any(target in normalize_label(cell) for cell in row):
            return idx
    return None


def parse_rows(
    rows: Sequence[Sequence[Any]],
    config: CompareConfig,
    *,
    file_name: str = "<memory>",
    sheet_name: str = "",
) -> Snapshot:
    """Turn raw sheet rows into a Snapshot.

    Raises:
        HeaderNotFoundError: the identifier header is missing from the scanned rows
    """
    id_label = config.header_labels[SemanticField.ID]
    header_idx = find_header_row(rows, id_label, config.header_scan_limit)
    if header_idx is None:
        raise HeaderNotFoundError(file_name, id_label, config.header_scan_limit)

    column_map = resolve_columns(rows[header_idx], config.header_labels)
    missing = [f.value for f in column_map.missing_fields]
    if missing:
        logger.debug(f"{file_name}: columns not found: {missing}")

    parsed = []
    dropped: list[int] = []
    for offset, raw in enumerate(rows[header_idx + 1:]):
        # シート上の行番号 (1-based)
        row_number = header_idx + offset + 2
        if is_blank_row(raw):
            continue
        row = normalize_row(raw, column_map, row_number)
        if row is None:
            dropped.append(row_number)
            logger.debug(f"{file_name}: row {row_number} has no identifier, skipped")
            continue
        parsed.append(row)

    return Snapshot(
        file_name=file_name,
        sheet_name=sheet_name,
        header_row=header_idx + 1,
        column_map=column_map,
        rows=tuple(parsed),
        dropped_rows=tuple(dropped),
    )


def parse_snapshot(path: Path, config: CompareConfig) -> Snapshot:
    """Read a workbook and parse its first sheet."""
    sheet_name, rows = read_first_sheet(path)
    return parse_rows(rows, config, file_name=path.name, sheet_name=sheet_name)
