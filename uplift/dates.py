"""Calendar helpers. Every date is a ``YYYY-MM-DD`` string read as a UTC day."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Union

import pandas as pd

DATE_FORMAT = "%Y-%m-%d"
_ONE_DAY = pd.Timedelta(days=1)


def parse_date(value: str) -> pd.Timestamp:
    return pd.Timestamp(value, tz="UTC").normalize()


def format_date(ts: pd.Timestamp) -> str:
    return ts.strftime(DATE_FORMAT)


def add_days(value: str, days: int) -> str:
    return format_date(parse_date(value) + pd.Timedelta(days=days))


def date_range(start: str, end: str) -> List[str]:
    # pandas yields an empty index when start > end
    days = pd.date_range(parse_date(start), parse_date(end), freq="D")
    return [format_date(d) for d in days]


def previous_day(ts: pd.Timestamp) -> pd.Timestamp:
    return ts - _ONE_DAY


def normalize_date(value: Union[str, date, datetime, pd.Timestamp]) -> str:
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.strftime(DATE_FORMAT)
