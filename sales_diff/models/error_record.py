from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the comparison error log.

Two kinds of problems are recorded, neither of which stops a row-level pass:
- HEADER_NOT_FOUND: file-level, written with sheet=<FILE_LEVEL> and row=-1
  right before the run is aborted
- IDENTITY_MISSING: a data row without an identifier that was left out of
  the comparison

The key set is fixed; see sales_diff/logging/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
    "FILE_LEVEL_SHEET",
    "FILE_LEVEL_ROW",
    "HEADER_NOT_FOUND",
    "IDENTITY_MISSING",
]

HEADER_NOT_FOUND = "HEADER_NOT_FOUND"
IDENTITY_MISSING = "IDENTITY_MISSING"

FILE_LEVEL_SHEET = "<FILE_LEVEL>"
FILE_LEVEL_ROW = -1


def _utc_stamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    """One JSON Lines entry of the error log.

    Attributes:
        timestamp: ISO8601 UTC with 'Z' suffix
        file: Workbook file name (no directory)
        sheet: Sheet the row belongs to, FILE_LEVEL_SHEET for file-level entries
        row: 1-based sheet row, FILE_LEVEL_ROW for file-level entries
        error_type: UPPER_SNAKE_CASE classification
        message: Human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return ErrorRecord(_utc_stamp(), file, sheet, row, error_type, message)

    @classmethod
    def header_not_found(cls, file: str, message: str) -> ErrorRecord:
        return cls.create(file, FILE_LEVEL_SHEET, FILE_LEVEL_ROW, HEADER_NOT_FOUND, message)

    @classmethod
    def identity_missing(cls, file: str, sheet: str, row: int) -> ErrorRecord:
        return cls.create(file, sheet, row, IDENTITY_MISSING, "row has no identifier and was skipped")

    @property
    def is_file_level(self) -> bool:
        return self.row == FILE_LEVEL_ROW

    def to_json_line(self) -> str:
        # asdict のキーのみ出力 (スキーマ固定)
        return json.dumps(asdict(self), ensure_ascii=False)
