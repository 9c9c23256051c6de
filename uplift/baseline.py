"""Channel-level clean-day baselines.

A date inside any live activity's observation window is contaminated and
can never serve as baseline for another date. For every contaminated date
the baseline is the median of the most recent clean days before it.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Set

from uplift.config import UpliftConfig
from uplift.dates import add_days, date_range, format_date, parse_date, previous_day
from uplift.models import Activity, DailyBaseline, DailyMetric, Reporter
from uplift.stats import median, stddev


def observation_window(activity: Activity, config: UpliftConfig) -> List[str]:
    if not activity.is_live:
        return []
    days = config.window_days_for(activity.channel)
    return date_range(activity.date, add_days(activity.date, days - 1))


def contaminated_dates(activities: Iterable[Activity], config: UpliftConfig) -> Set[str]:
    dates: Set[str] = set()
    for activity in activities:
        dates.update(observation_window(activity, config))
    return dates


def clean_day_baseline(
    date: str,
    metrics_by_date: Mapping[str, DailyMetric],
    contaminated: Set[str],
    config: UpliftConfig,
) -> DailyBaseline:
    clean_days: List[str] = []
    cursor = previous_day(parse_date(date))
    lookback = 0

    while len(clean_days) < config.baseline_window_days and lookback < config.baseline_lookback_days:
        day = format_date(cursor)
        if day not in contaminated and day in metrics_by_date:
            clean_days.append(day)
        cursor = previous_day(cursor)
        lookback += 1

    if not clean_days:
        return DailyBaseline(date=date, signups=0.0, activations=0.0, signups_sigma=0.0)

    signups = [metrics_by_date[d].signups for d in clean_days]
    activations = [metrics_by_date[d].activations for d in clean_days]

    # median so a single organic spike does not move the baseline
    return DailyBaseline(
        date=date,
        signups=median(signups),
        activations=median(activations),
        signups_sigma=stddev(signups),
        clean_days=tuple(clean_days),
    )


def compute_daily_baselines(
    activities: Iterable[Activity],
    metrics_by_date: Mapping[str, DailyMetric],
    config: UpliftConfig,
    reporter: Optional[Reporter] = None,
) -> Dict[str, DailyBaseline]:
    contaminated = contaminated_dates(activities, config)

    baselines: Dict[str, DailyBaseline] = {}
    for date in sorted(contaminated):
        baseline = clean_day_baseline(date, metrics_by_date, contaminated, config)
        baselines[date] = baseline
        if reporter is not None:
            reporter("baseline.computed", {
                "date": date,
                "signups": baseline.signups,
                "activations": baseline.activations,
                "signups_sigma": baseline.signups_sigma,
                "clean_days": len(baseline.clean_days),
            })
    return baselines
