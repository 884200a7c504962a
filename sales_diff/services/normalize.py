from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any

import numpy as np
import pandas as pd

"""Cell value normalization shared by header matching, row keys and field comparison.

The ledger files are maintained by hand, so the same value regularly shows up
with stray spaces, line breaks, NBSP/BOM/zero-width characters, or as a raw
spreadsheet date serial in one version and a calendar string in the next.
Everything is reduced to a canonical string before it is keyed or compared.

Rules of normalize_for_comparison (applied in order):
1. None / NaN / NaT / blank-after-trim -> ""
2. numbers in the date-serial range (30000, 60000) -> "YYYY/MM/DD"
   date / datetime values -> "YYYY/MM/DD"
3. anything else -> str (integral floats without ".0")
4. remove every whitespace / invisible spacing character anywhere
"""

__all__ = [
    "DATE_SERIAL_MIN",
    "DATE_SERIAL_MAX",
    "is_blank",
    "is_date_serial",
    "format_excel_date",
    "to_display_string",
    "normalize_for_comparison",
    "normalize_label",
]

# Exclusive bounds: roughly 1982-02-18 .. 2064-04-08
DATE_SERIAL_MIN = 30000
DATE_SERIAL_MAX = 60000

# Day 0 of the spreadsheet date system (serial 25569 == 1970-01-01)
EXCEL_EPOCH = date(1899, 12, 30)
DATE_FORMAT = "%Y/%m/%d"

# \s covers tabs, newlines and NBSP; BOM and zero-width space/joiners are listed explicitly
_INVISIBLE_RE = re.compile(r"[\s\uFEFF\u00A0\u200B-\u200D]+")


def _is_number(value: Any) -> bool:
    # bool は int のサブクラスなので除外
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings."""
    if value is None:
        return True
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def is_date_serial(value: Any) -> bool:
    """Heuristic: a plain number inside the plausible date-serial range."""
    if not _is_number(value):
        return False
    v = float(value)
    return DATE_SERIAL_MIN < v < DATE_SERIAL_MAX


def format_excel_date(serial: float) -> str:
    """Convert a spreadsheet date serial to a YYYY/MM/DD string.

    The time-of-day fraction is dropped.

    >>> format_excel_date(46023)
    '2026/01/01'
    """
    day = EXCEL_EPOCH + timedelta(days=math.floor(float(serial)))
    return day.strftime(DATE_FORMAT)


def _format_number(value: Any) -> str:
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    f = float(value)
    if f.is_integer():
        return str(int(f))
    return str(f)


def to_display_string(value: Any) -> str:
    """Stringify a cell for display: date serials become calendar dates, text is trimmed."""
    if is_blank(value):
        return ""
    if is_date_serial(value):
        return format_excel_date(value)
    if isinstance(value, (datetime, date)):
        return value.strftime(DATE_FORMAT)
    if _is_number(value):
        return _format_number(value)
    return str(value).strip()


def normalize_for_comparison(value: Any) -> str:
    """Canonical string used for identity keys and tracked-field comparison.

    Idempotent: normalizing an already normalized string returns it unchanged.
    """
    return _INVISIBLE_RE.sub("", to_display_string(value))


def normalize_label(value: Any) -> str:
    """Header/label form: normalized and case-folded."""
    return normalize_for_comparison(value).casefold()
