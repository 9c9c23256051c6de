from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from uplift.attribution import attribute_activity, clicks_for_attribution, daily_pools, overlap_map
from uplift.baseline import compute_daily_baselines
from uplift.config import UpliftConfig
from uplift.dates import add_days, date_range
from uplift.models import (
    Activity,
    ActivityReport,
    DailyMetric,
    DayDataPoint,
    Reporter,
)
from uplift.stats import LOW, compute_confidence, expected_total, floored_incremental, mean, stddev

logger = logging.getLogger(__name__)

NOT_LIVE_EXPLANATION = "Activity is not live."


def _metrics_by_date(metrics: Iterable[DailyMetric]) -> Dict[str, DailyMetric]:
    # one record per (date, channel); a duplicate replaces the earlier row
    return {m.date: m for m in metrics}


def _window_totals(dates: Sequence[str], metrics_by_date: Mapping[str, DailyMetric]) -> Tuple[float, float]:
    signups = 0.0
    activations = 0.0
    for d in dates:
        m = metrics_by_date.get(d)
        if m is not None:
            signups += m.signups
            activations += m.activations
    return signups, activations


def _display_series(
    pre_dates: Sequence[str],
    post_dates: Sequence[str],
    metrics_by_date: Mapping[str, DailyMetric],
) -> Tuple[DayDataPoint, ...]:
    post_set = set(post_dates)
    points = []
    for d in list(pre_dates) + list(post_dates):
        m = metrics_by_date.get(d)
        points.append(DayDataPoint(
            date=d,
            signups=m.signups if m is not None else None,
            activations=m.activations if m is not None else None,
            is_baseline=d not in post_set,
            is_post_window=d in post_set,
        ))
    return tuple(points)


def _pre_window(activity: Activity, config: UpliftConfig) -> List[str]:
    return date_range(
        add_days(activity.date, -config.baseline_window_days),
        add_days(activity.date, -1),
    )


def _post_window(activity: Activity, config: UpliftConfig) -> List[str]:
    days = config.window_days_for(activity.channel)
    return date_range(activity.date, add_days(activity.date, days - 1))


def _pre_window_values(
    pre_dates: Sequence[str],
    metrics_by_date: Mapping[str, DailyMetric],
) -> Tuple[List[int], List[int]]:
    signups: List[int] = []
    activations: List[int] = []
    for d in pre_dates:
        m = metrics_by_date.get(d)
        if m is not None:
            signups.append(m.signups)
            activations.append(m.activations)
    return signups, activations


def _not_live_report(
    activity: Activity,
    metrics_by_date: Mapping[str, DailyMetric],
    config: UpliftConfig,
) -> ActivityReport:
    pre_dates = _pre_window(activity, config)
    post_dates = _post_window(activity, config)
    window_days = len(post_dates)

    b_signups, b_activations = _pre_window_values(pre_dates, metrics_by_date)
    signups_avg = mean(b_signups)
    activations_avg = mean(b_activations)
    observed_signups, observed_activations = _window_totals(post_dates, metrics_by_date)

    return ActivityReport(
        activity=activity,
        baseline_window_start=pre_dates[0],
        baseline_window_end=pre_dates[-1],
        baseline_avg=signups_avg,
        baseline_activations_avg=activations_avg,
        baseline_stddev=stddev(b_signups),
        baseline_days=len(b_signups),
        post_window_start=post_dates[0],
        post_window_end=post_dates[-1],
        post_window_days=window_days,
        observed_signups=observed_signups,
        expected_signups=expected_total(signups_avg, window_days),
        incremental_signups=0.0,
        observed_activations=observed_activations,
        expected_activations=expected_total(activations_avg, window_days),
        incremental_activations=0.0,
        raw_pooled_signups=0.0,
        raw_pooled_activations=0.0,
        floor_signups=activity.deterministic_tracked_signups or 0.0,
        clicks_used=None,
        clicks_source=None,
        confidence=LOW,
        confidence_explanation=NOT_LIVE_EXPLANATION,
        daily_data=_display_series(pre_dates, post_dates, metrics_by_date),
    )


def compute_channel_reports(
    activities: Sequence[Activity],
    metrics: Iterable[DailyMetric],
    config: UpliftConfig,
    reporter: Optional[Reporter] = None,
) -> List[ActivityReport]:
    """Reports for every activity of a single channel.

    The caller is responsible for passing one channel's activities and
    metrics only; see ``compute_all_reports`` for the multi-channel entry.
    """
    metrics_by_date = _metrics_by_date(metrics)

    baselines = compute_daily_baselines(activities, metrics_by_date, config, reporter)
    pools = daily_pools(baselines, metrics_by_date, reporter)
    overlaps = overlap_map(activities, config)
    clicks = {a.id: clicks_for_attribution(a) for a in activities}

    reports: List[ActivityReport] = []
    for activity in activities:
        if not activity.is_live:
            reports.append(_not_live_report(activity, metrics_by_date, config))
            continue

        pre_dates = _pre_window(activity, config)
        post_dates = _post_window(activity, config)
        window_days = len(post_dates)

        shares = attribute_activity(activity, post_dates, pools, overlaps, clicks)
        attributed_signups = sum(s.attributed_signups for s in shares)
        attributed_activations = sum(s.attributed_activations for s in shares)

        observed_signups, observed_activations = _window_totals(post_dates, metrics_by_date)

        # the first window day stands in for the whole window
        ref = baselines[post_dates[0]]
        if ref.clean_days:
            baseline_start, baseline_end = ref.clean_days[-1], ref.clean_days[0]
        else:
            baseline_start, baseline_end = pre_dates[0], pre_dates[-1]

        confidence, explanation = compute_confidence(
            attributed_signups,
            ref.signups_sigma,
            window_days,
            len(ref.clean_days),
        )

        report = ActivityReport(
            activity=activity,
            baseline_window_start=baseline_start,
            baseline_window_end=baseline_end,
            baseline_avg=ref.signups,
            baseline_activations_avg=ref.activations,
            baseline_stddev=ref.signups_sigma,
            baseline_days=len(ref.clean_days),
            post_window_start=post_dates[0],
            post_window_end=post_dates[-1],
            post_window_days=window_days,
            observed_signups=observed_signups,
            expected_signups=expected_total(ref.signups, window_days),
            incremental_signups=attributed_signups,
            observed_activations=observed_activations,
            expected_activations=expected_total(ref.activations, window_days),
            incremental_activations=attributed_activations,
            raw_pooled_signups=sum(s.pooled_signups for s in shares),
            raw_pooled_activations=sum(s.pooled_activations for s in shares),
            floor_signups=activity.deterministic_tracked_signups or 0.0,
            clicks_used=clicks[activity.id].clicks,
            clicks_source=clicks[activity.id].source,
            confidence=confidence,
            confidence_explanation=explanation,
            daily_shares=shares,
            daily_data=_display_series(pre_dates, post_dates, metrics_by_date),
        )
        reports.append(report)

        if reporter is not None:
            reporter("activity.attributed", {
                "activity_id": activity.id,
                "incremental_signups": attributed_signups,
                "incremental_activations": attributed_activations,
                "confidence": confidence,
            })

    live = sum(1 for a in activities if a.is_live)
    logger.debug(
        "Computed %d reports (%d live) over %d contaminated dates",
        len(reports), live, len(baselines),
    )
    return reports


def compute_all_reports(
    activities: Sequence[Activity],
    metrics: Iterable[DailyMetric],
    config: UpliftConfig,
    reporter: Optional[Reporter] = None,
) -> List[ActivityReport]:
    """Run every channel independently; reports come back in input order."""
    activities_by_channel: Dict[str, List[Activity]] = OrderedDict()
    for activity in activities:
        activities_by_channel.setdefault(activity.channel, []).append(activity)

    metrics_by_channel: Dict[str, List[DailyMetric]] = {}
    for metric in metrics:
        metrics_by_channel.setdefault(metric.channel, []).append(metric)

    by_id: Dict[str, ActivityReport] = {}
    for channel, channel_activities in activities_by_channel.items():
        channel_reports = compute_channel_reports(
            channel_activities,
            metrics_by_channel.get(channel, []),
            config,
            reporter,
        )
        for report in channel_reports:
            by_id[report.activity.id] = report

        if reporter is not None:
            reporter("channel.completed", {
                "channel": channel,
                "activities": len(channel_activities),
                "incremental_signups": sum(r.incremental_signups for r in channel_reports),
                "incremental_activations": sum(r.incremental_activations for r in channel_reports),
            })
        logger.debug("Channel %s: %d activities", channel, len(channel_activities))

    return [by_id[a.id] for a in activities]


def compute_activity_report(
    activity: Activity,
    metrics: Iterable[DailyMetric],
    config: UpliftConfig,
) -> ActivityReport:
    """Isolated report for one activity, ignoring every other activity.

    Uses the fixed pre-window mean as baseline and ``observed - expected``
    as lift. No pooling or click-share is applied, so overlapping activities
    can double count; prefer ``compute_all_reports`` for published figures.
    """
    metrics_by_date = _metrics_by_date(m for m in metrics if m.channel == activity.channel)
    if not activity.is_live:
        return _not_live_report(activity, metrics_by_date, config)

    pre_dates = _pre_window(activity, config)
    post_dates = _post_window(activity, config)
    window_days = len(post_dates)

    b_signups, b_activations = _pre_window_values(pre_dates, metrics_by_date)
    signups_avg = mean(b_signups)
    activations_avg = mean(b_activations)
    sigma = stddev(b_signups)

    observed_signups, observed_activations = _window_totals(post_dates, metrics_by_date)
    expected_signups = expected_total(signups_avg, window_days)
    expected_activations = expected_total(activations_avg, window_days)
    incremental_signups = floored_incremental(observed_signups, expected_signups)
    incremental_activations = floored_incremental(observed_activations, expected_activations)

    confidence, explanation = compute_confidence(incremental_signups, sigma, window_days, len(b_signups))
    click_count = clicks_for_attribution(activity)

    return ActivityReport(
        activity=activity,
        baseline_window_start=pre_dates[0],
        baseline_window_end=pre_dates[-1],
        baseline_avg=signups_avg,
        baseline_activations_avg=activations_avg,
        baseline_stddev=sigma,
        baseline_days=len(b_signups),
        post_window_start=post_dates[0],
        post_window_end=post_dates[-1],
        post_window_days=window_days,
        observed_signups=observed_signups,
        expected_signups=expected_signups,
        incremental_signups=incremental_signups,
        observed_activations=observed_activations,
        expected_activations=expected_activations,
        incremental_activations=incremental_activations,
        raw_pooled_signups=incremental_signups,
        raw_pooled_activations=incremental_activations,
        floor_signups=activity.deterministic_tracked_signups or 0.0,
        clicks_used=click_count.clicks,
        clicks_source=click_count.source,
        confidence=confidence,
        confidence_explanation=explanation,
        daily_data=_display_series(pre_dates, post_dates, metrics_by_date),
    )
