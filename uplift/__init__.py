from uplift.attribution import attribution_share, clicks_for_attribution
from uplift.config import UpliftConfig, load_settings
from uplift.dates import add_days, date_range, format_date, parse_date
from uplift.models import (
    Activity,
    ActivityReport,
    ClickCount,
    DailyAttributionShare,
    DailyBaseline,
    DailyMetric,
    DayDataPoint,
)
from uplift.reports import compute_activity_report, compute_all_reports, compute_channel_reports
from uplift.stats import compute_confidence, mean, median, stddev

__all__ = [
    "Activity",
    "ActivityReport",
    "ClickCount",
    "DailyAttributionShare",
    "DailyBaseline",
    "DailyMetric",
    "DayDataPoint",
    "UpliftConfig",
    "add_days",
    "attribution_share",
    "clicks_for_attribution",
    "compute_activity_report",
    "compute_all_reports",
    "compute_channel_reports",
    "compute_confidence",
    "date_range",
    "format_date",
    "load_settings",
    "mean",
    "median",
    "parse_date",
    "stddev",
]
