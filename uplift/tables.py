from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from uplift.dates import normalize_date
from uplift.models import Activity, ActivityReport, DailyMetric

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = ["id", "channel", "date", "status"]
METRIC_COLUMNS = ["date", "channel", "signups", "activations"]


def _require_columns(df: pd.DataFrame, columns: Iterable[str], what: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"{what} table is missing required column(s): {', '.join(missing)}")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _opt_float(value: Any) -> Optional[float]:
    if _is_missing(value):
        return None
    return float(value)


def _opt_str(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value).strip()


def parse_metadata(value: Any, activity_id: str = "") -> Dict[str, float]:
    if _is_missing(value):
        return {}
    if isinstance(value, Mapping):
        raw = dict(value)
    else:
        try:
            raw = json.loads(str(value))
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed metadata for activity %s: %r", activity_id, value)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring non-object metadata for activity %s: %r", activity_id, value)
            return {}

    parsed: Dict[str, float] = {}
    for key, v in raw.items():
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            parsed[str(key)] = float(v)
    return parsed


def activities_from_frame(df: pd.DataFrame) -> List[Activity]:
    _require_columns(df, ACTIVITY_COLUMNS, "Activities")

    activities: List[Activity] = []
    for row in df.to_dict(orient="records"):
        activity_id = str(row["id"]).strip()
        activities.append(Activity(
            id=activity_id,
            channel=str(row["channel"]).strip(),
            date=normalize_date(row["date"]),
            status=str(row["status"]).strip().lower(),
            cost_usd=_opt_float(row.get("cost_usd")),
            actual_clicks=_opt_float(row.get("actual_clicks")),
            deterministic_clicks=_opt_float(row.get("deterministic_clicks")),
            deterministic_tracked_signups=_opt_float(row.get("deterministic_tracked_signups")),
            metadata=parse_metadata(row.get("metadata"), activity_id),
            activity_type=_opt_str(row.get("activity_type")) or "",
            partner_name=_opt_str(row.get("partner_name")) or "",
            notes=_opt_str(row.get("notes")),
        ))
    return activities


def metrics_from_frame(df: pd.DataFrame) -> List[DailyMetric]:
    _require_columns(df, METRIC_COLUMNS, "Daily metrics")

    d = df[METRIC_COLUMNS].copy()
    d["signups"] = pd.to_numeric(d["signups"], errors="coerce")
    d["activations"] = pd.to_numeric(d["activations"], errors="coerce")

    incomplete = d["signups"].isna() | d["activations"].isna()
    if incomplete.any():
        # a missing count means no data for that day, never zero
        logger.warning("Dropping %d daily metric row(s) with missing counts", int(incomplete.sum()))
        d = d[~incomplete]

    return [
        DailyMetric(
            date=normalize_date(row["date"]),
            channel=str(row["channel"]).strip(),
            signups=int(row["signups"]),
            activations=int(row["activations"]),
        )
        for row in d.to_dict(orient="records")
    ]


def reports_to_frame(reports: Iterable[ActivityReport]) -> pd.DataFrame:
    rows = []
    for r in reports:
        a = r.activity
        rows.append({
            "activity_id": a.id,
            "channel": a.channel,
            "date": a.date,
            "status": a.status,
            "activity_type": a.activity_type,
            "partner_name": a.partner_name,
            "cost_usd": a.cost_usd,
            "baseline_window_start": r.baseline_window_start,
            "baseline_window_end": r.baseline_window_end,
            "baseline_avg": r.baseline_avg,
            "baseline_activations_avg": r.baseline_activations_avg,
            "baseline_stddev": r.baseline_stddev,
            "baseline_days": r.baseline_days,
            "post_window_start": r.post_window_start,
            "post_window_end": r.post_window_end,
            "post_window_days": r.post_window_days,
            "observed_signups": r.observed_signups,
            "expected_signups": r.expected_signups,
            "incremental_signups": r.incremental_signups,
            "observed_activations": r.observed_activations,
            "expected_activations": r.expected_activations,
            "incremental_activations": r.incremental_activations,
            "raw_pooled_signups": r.raw_pooled_signups,
            "raw_pooled_activations": r.raw_pooled_activations,
            "floor_signups": r.floor_signups,
            "below_floor_flag": int(r.below_floor),
            "clicks_used": r.clicks_used,
            "clicks_source": r.clicks_source,
            "cost_per_incremental_signup": r.cost_per_incremental_signup,
            "confidence": r.confidence,
            "confidence_explanation": r.confidence_explanation,
        })
    return pd.DataFrame(rows)


def shares_to_frame(reports: Iterable[ActivityReport]) -> pd.DataFrame:
    rows = []
    for r in reports:
        for s in r.daily_shares:
            rows.append({
                "activity_id": r.activity.id,
                "channel": r.activity.channel,
                "date": s.date,
                "pooled_signups": s.pooled_signups,
                "pooled_activations": s.pooled_activations,
                "my_clicks": s.my_clicks,
                "total_clicks": s.total_clicks,
                "share": s.share,
                "attributed_signups": s.attributed_signups,
                "attributed_activations": s.attributed_activations,
                "overlapping_activities": "|".join(s.overlapping_activities),
                "n_overlapping": len(s.overlapping_activities),
            })
    return pd.DataFrame(rows, columns=[
        "activity_id", "channel", "date",
        "pooled_signups", "pooled_activations",
        "my_clicks", "total_clicks", "share",
        "attributed_signups", "attributed_activations",
        "overlapping_activities", "n_overlapping",
    ])


def daily_points_to_frame(reports: Iterable[ActivityReport]) -> pd.DataFrame:
    rows = []
    for r in reports:
        for p in r.daily_data:
            rows.append({
                "activity_id": r.activity.id,
                "date": p.date,
                "signups": p.signups,
                "activations": p.activations,
                "period": "post" if p.is_post_window else "baseline",
            })
    return pd.DataFrame(rows, columns=["activity_id", "date", "signups", "activations", "period"])


def summarize_channels(reports_df: pd.DataFrame) -> pd.DataFrame:
    if reports_df.empty:
        return pd.DataFrame(columns=[
            "channel", "activities", "live_activities", "cost_usd",
            "observed_signups", "incremental_signups", "incremental_activations",
            "high_confidence", "cost_per_incremental_signup",
        ])

    d = reports_df.copy()
    d["cost_usd"] = pd.to_numeric(d["cost_usd"], errors="coerce")
    d["is_live"] = (d["status"] == "live").astype(int)
    d["is_high"] = (d["confidence"] == "HIGH").astype(int)
    live = d[d["is_live"] == 1]

    out = d.groupby("channel", as_index=False).agg(
        activities=("activity_id", "count"),
        live_activities=("is_live", "sum"),
        high_confidence=("is_high", "sum"),
    )
    live_agg = live.groupby("channel", as_index=False).agg(
        cost_usd=("cost_usd", "sum"),
        observed_signups=("observed_signups", "sum"),
        incremental_signups=("incremental_signups", "sum"),
        incremental_activations=("incremental_activations", "sum"),
    )
    out = out.merge(live_agg, on="channel", how="left")
    for col in ["cost_usd", "observed_signups", "incremental_signups", "incremental_activations"]:
        out[col] = out[col].fillna(0.0)

    out["cost_per_incremental_signup"] = out["cost_usd"] / out["incremental_signups"].where(out["incremental_signups"] > 0)
    return out[[
        "channel", "activities", "live_activities", "cost_usd",
        "observed_signups", "incremental_signups", "incremental_activations",
        "high_confidence", "cost_per_incremental_signup",
    ]]
