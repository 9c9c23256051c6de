from datetime import date

import pandas as pd

from uplift.dates import add_days, date_range, format_date, normalize_date, parse_date


def test_parse_date_is_utc_midnight():
    ts = parse_date("2024-03-10")
    assert ts == pd.Timestamp("2024-03-10 00:00", tz="UTC")
    assert format_date(ts) == "2024-03-10"


def test_add_days_crosses_month_year_and_leap_day():
    assert add_days("2024-02-28", 1) == "2024-02-29"
    assert add_days("2024-03-01", -1) == "2024-02-29"
    assert add_days("2023-12-31", 1) == "2024-01-01"
    assert add_days("2024-01-15", -14) == "2024-01-01"
    assert add_days("2024-01-15", 0) == "2024-01-15"


def test_add_days_ignores_daylight_saving_transitions():
    # US DST starts 2024-03-10 and ends 2024-11-03
    assert add_days("2024-03-09", 1) == "2024-03-10"
    assert add_days("2024-03-09", 2) == "2024-03-11"
    assert add_days("2024-11-02", 2) == "2024-11-04"


def test_date_range_is_inclusive():
    assert date_range("2024-01-30", "2024-02-02") == [
        "2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02",
    ]
    assert date_range("2024-01-05", "2024-01-05") == ["2024-01-05"]


def test_date_range_empty_when_start_after_end():
    assert date_range("2024-01-06", "2024-01-05") == []


def test_normalize_date_accepts_common_types():
    assert normalize_date("2024-01-05") == "2024-01-05"
    assert normalize_date(date(2024, 1, 5)) == "2024-01-05"
    assert normalize_date(pd.Timestamp("2024-01-05 13:45")) == "2024-01-05"
    # 23:30 in New York is already the next day in UTC
    assert normalize_date(pd.Timestamp("2024-01-05 23:30", tz="America/New_York")) == "2024-01-06"
