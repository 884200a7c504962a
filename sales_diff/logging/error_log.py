from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sales_diff.models.error_record import ErrorRecord

"""Error log buffering.

- JSON Lines, fixed key set (see error_log_schema.json next to this module)
- one file per run: logs/errors-YYYYMMDD-HHMMSS.log (UTC), created on first flush
- records are buffered and written on flush()
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "SCHEMA_PATH",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"
SCHEMA_PATH = Path(__file__).with_name("error_log_schema.json")


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush appends JSON Lines.

    Single-threaded use only.
    """
    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = logs_dir
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path:
        fp = self.file_path
        if not self._records:
            return fp  # 空ならパス確定のみ
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
