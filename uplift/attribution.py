"""Per-date surplus pools and their click-share split across co-active activities."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from uplift.config import UpliftConfig
from uplift.baseline import observation_window
from uplift.models import Activity, ClickCount, DailyAttributionShare, DailyBaseline, DailyMetric, Reporter

# sheet exports write camelCase, the generator writes snake_case
ESTIMATED_CLICKS_KEYS = ("estClicks", "est_clicks")

# date -> (signups pool, activations pool)
Pools = Dict[str, Tuple[float, float]]


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def clicks_for_attribution(activity: Activity) -> ClickCount:
    if _positive(activity.actual_clicks):
        return ClickCount(float(activity.actual_clicks), "actual")
    if _positive(activity.deterministic_clicks):
        return ClickCount(float(activity.deterministic_clicks), "deterministic")
    for key in ESTIMATED_CLICKS_KEYS:
        estimated = activity.metadata.get(key)
        if _positive(estimated):
            return ClickCount(float(estimated), "estimated")
    return ClickCount(None, None)


def daily_pools(
    baselines: Mapping[str, DailyBaseline],
    metrics_by_date: Mapping[str, DailyMetric],
    reporter: Optional[Reporter] = None,
) -> Pools:
    pools: Pools = {}
    for date, baseline in baselines.items():
        metric = metrics_by_date.get(date)
        if metric is None:
            pools[date] = (0.0, 0.0)
        else:
            pools[date] = (
                max(0.0, metric.signups - baseline.signups),
                max(0.0, metric.activations - baseline.activations),
            )
        if reporter is not None:
            reporter("pool.computed", {
                "date": date,
                "has_metric": metric is not None,
                "signups": pools[date][0],
                "activations": pools[date][1],
            })
    return pools


def overlap_map(activities: Iterable[Activity], config: UpliftConfig) -> Dict[str, List[str]]:
    overlaps: Dict[str, List[str]] = {}
    for activity in activities:
        for date in observation_window(activity, config):
            overlaps.setdefault(date, []).append(activity.id)
    return overlaps


def total_clicks(overlapping_clicks: Sequence[Optional[float]]) -> float:
    return float(sum(c for c in overlapping_clicks if _positive(c)))


def attribution_share(my_clicks: Optional[float], overlapping_clicks: Sequence[Optional[float]]) -> float:
    """Fraction of a date's pool owed to one activity.

    ``overlapping_clicks`` holds the click counts of every activity active
    on the date, the caller's own included.
    """
    if not overlapping_clicks:
        return 0.0
    total = total_clicks(overlapping_clicks)
    if total == 0:
        return 1.0 / len(overlapping_clicks)
    if not _positive(my_clicks):
        # others can prove engagement and this activity cannot
        return 0.0
    return float(my_clicks) / total


def attribute_activity(
    activity: Activity,
    window: Sequence[str],
    pools: Mapping[str, Tuple[float, float]],
    overlaps: Mapping[str, Sequence[str]],
    clicks: Mapping[str, ClickCount],
) -> Tuple[DailyAttributionShare, ...]:
    my_clicks = clicks[activity.id].clicks
    shares: List[DailyAttributionShare] = []

    for date in window:
        pooled_signups, pooled_activations = pools.get(date, (0.0, 0.0))
        overlapping = tuple(overlaps.get(date, ()))
        overlapping_clicks = [clicks[a].clicks for a in overlapping]

        share = attribution_share(my_clicks, overlapping_clicks)
        total = total_clicks(overlapping_clicks)

        shares.append(DailyAttributionShare(
            date=date,
            pooled_signups=pooled_signups,
            pooled_activations=pooled_activations,
            my_clicks=my_clicks or 0.0,
            total_clicks=total if total > 0 else float(len(overlapping)),
            share=share,
            attributed_signups=pooled_signups * share,
            attributed_activations=pooled_activations * share,
            overlapping_activities=overlapping,
        ))

    return tuple(shares)
