"""
Year-month helpers.

A year-month is a fixed-width, zero-padded ``YYYY-MM`` string. Because the width
is fixed, plain string comparison orders year-months chronologically
("2024-12" < "2025-01"). Resolution and rollover rely on that ordering directly;
keep it as string comparison rather than converting to dates for every check.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Iterator, Optional

import pandas as pd


YEAR_MONTH_RE = re.compile(r"([0-9]{4})-([0-9]{2})")


def is_valid_year_month(value) -> bool:
    if not isinstance(value, str):
        return False
    match = YEAR_MONTH_RE.fullmatch(value)
    if not match:
        return False
    return 1 <= int(match.group(2)) <= 12


def current_year_month(now: Optional[dt.datetime] = None) -> str:
    now = now or dt.datetime.now()
    return f"{now.year:04d}-{now.month:02d}"


def add_months(ym: str, months: int) -> str:
    return str(pd.Period(ym, freq="M") + months)


def month_start(ym: str) -> dt.datetime:
    return pd.Period(ym, freq="M").to_timestamp().to_pydatetime()


def iter_months(after: str, through: str) -> Iterator[str]:
    """Yield every year-month strictly after ``after`` up to and including ``through``."""
    cursor = add_months(after, 1)
    while cursor <= through:
        yield cursor
        cursor = add_months(cursor, 1)
