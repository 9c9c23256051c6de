from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd


def _project_root_from_this_file(this_file: Path) -> Path:
    # scripts/00_generate_data.py -> project root is parent of "scripts"
    return this_file.resolve().parents[1]


PROJECT_ROOT = _project_root_from_this_file(Path(__file__))
sys.path.insert(0, str(PROJECT_ROOT))

from uplift.config import UpliftConfig, load_settings  # noqa: E402


@dataclass(frozen=True)
class Paths:
    project_root: Path
    raw_dir: Path

    @staticmethod
    def from_config(project_root: Path, cfg: dict) -> "Paths":
        out = cfg.get("output", {})
        raw_dir = project_root / out.get("raw_dir", "data/raw")
        return Paths(project_root, raw_dir)

    def ensure(self) -> None:
        self.raw_dir.mkdir(parents=True, exist_ok=True)


PARTNERS = {
    "newsletter": ["TLDR", "Morning Brew", "Bytes", "Pointer", "Console", "Hacker Newsletter"],
    "podcast": ["Syntax", "Changelog", "Software Engineering Daily", "Ship It"],
    "youtube": ["Fireship", "Theo", "ThePrimeagen", "Web Dev Simplified"],
}

# Mon..Sun multipliers on organic volume
WEEKDAY_BOOST = np.array([1.08, 1.10, 1.06, 1.02, 0.96, 0.84, 0.80])


def _rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


def _make_activities(
    rng: np.random.Generator,
    cfg: dict,
    channel: str,
    ch_cfg: dict,
    uplift_cfg: UpliftConfig,
) -> pd.DataFrame:
    start = pd.Timestamp(cfg["simulation"]["start_date"])
    end = pd.Timestamp(cfg["simulation"]["end_date"])
    n = int(ch_cfg["n_activities"])
    window = uplift_cfg.window_days_for(channel)

    candidates = pd.date_range(start + pd.Timedelta(days=21), end - pd.Timedelta(days=window), freq="D")
    dates = pd.to_datetime(rng.choice(candidates, size=min(n, len(candidates)), replace=False)).sort_values()
    n = len(dates)

    booked_from = end - pd.Timedelta(days=int(cfg["simulation"]["booked_days"]))
    canceled = rng.random(n) < float(cfg["simulation"]["canceled_rate"])
    status = np.where(dates > booked_from, "booked", np.where(canceled, "canceled", "live"))

    est_clicks = np.round(rng.lognormal(mean=7.0, sigma=0.6, size=n))
    actual = np.where(rng.random(n) < 0.6, np.round(est_clicks * rng.normal(1.0, 0.25, size=n).clip(0.3)), np.nan)
    deterministic = np.where(rng.random(n) < 0.5, np.round(est_clicks * 0.9), np.nan)
    # a few activities carry no click evidence at all
    no_clicks = rng.random(n) < 0.1
    actual = np.where(no_clicks, np.nan, actual)
    deterministic = np.where(no_clicks, np.nan, deterministic)

    cost = np.round(rng.uniform(400, 6000, size=n), -1)
    tracked = np.round(est_clicks * rng.uniform(0.002, 0.01, size=n))

    metadata: List[str] = []
    for i in range(n):
        meta: Dict[str, float] = {}
        if not no_clicks[i]:
            meta["est_clicks"] = float(est_clicks[i])
        if channel == "newsletter":
            meta["subscribers"] = float(np.round(est_clicks[i] * rng.uniform(40, 90)))
        metadata.append(json.dumps(meta))

    return pd.DataFrame({
        "id": [f"{channel[:2].upper()}{str(i + 1).zfill(3)}" for i in range(n)],
        "channel": channel,
        "date": dates.strftime("%Y-%m-%d"),
        "status": status,
        "activity_type": channel,
        "partner_name": rng.choice(PARTNERS[channel], size=n),
        "cost_usd": cost,
        "actual_clicks": actual,
        "deterministic_clicks": deterministic,
        "deterministic_tracked_signups": tracked,
        "metadata": metadata,
        "notes": "",
    })


def _simulate_metrics(
    rng: np.random.Generator,
    cfg: dict,
    channel: str,
    ch_cfg: dict,
    activities: pd.DataFrame,
    uplift_cfg: UpliftConfig,
) -> pd.DataFrame:
    days = pd.date_range(cfg["simulation"]["start_date"], cfg["simulation"]["end_date"], freq="D")
    organic = float(ch_cfg["organic_signups"]) * WEEKDAY_BOOST[days.weekday.to_numpy()]

    # occasional organic spikes (press mentions) that no activity explains
    spikes = rng.random(len(days)) < 0.015
    organic = np.where(spikes, organic * 2.5, organic)

    lift = np.zeros(len(days))
    window = uplift_cfg.window_days_for(channel)
    decay = np.exp(-0.6 * np.arange(window))
    decay = decay / decay.sum()

    live = activities[activities["status"] == "live"]
    for _, act in live.iterrows():
        clicks = act["actual_clicks"]
        if pd.isna(clicks):
            clicks = act["deterministic_clicks"]
        if pd.isna(clicks):
            clicks = 0.0
        total_lift = float(ch_cfg["lift_per_1k_clicks"]) * float(clicks) / 1000.0
        offset = int((pd.Timestamp(act["date"]) - days[0]).days)
        for t in range(window):
            if 0 <= offset + t < len(days):
                lift[offset + t] += total_lift * decay[t]

    signups = rng.poisson(organic + lift)
    activations = rng.binomial(signups, float(ch_cfg["activation_rate"]))

    df = pd.DataFrame({
        "date": days.strftime("%Y-%m-%d"),
        "channel": channel,
        "signups": signups,
        "activations": activations,
    })

    keep = rng.random(len(df)) >= float(cfg["simulation"]["missing_day_rate"])
    return df[keep].reset_index(drop=True)


def main() -> None:
    cfg = load_settings(PROJECT_ROOT)
    uplift_cfg = UpliftConfig.from_config(cfg)
    rng = _rng(int(cfg["project"]["random_seed"]))

    paths = Paths.from_config(PROJECT_ROOT, cfg)
    paths.ensure()

    activities = []
    metrics = []
    for channel, ch_cfg in cfg["simulation"]["channels"].items():
        acts = _make_activities(rng, cfg, channel, ch_cfg, uplift_cfg)
        activities.append(acts)
        metrics.append(_simulate_metrics(rng, cfg, channel, ch_cfg, acts, uplift_cfg))

    activities_df = pd.concat(activities, ignore_index=True)
    metrics_df = pd.concat(metrics, ignore_index=True)

    activities_df.to_csv(paths.raw_dir / "activities.csv", index=False)
    metrics_df.to_csv(paths.raw_dir / "daily_metrics.csv", index=False)

    print("✅ Generated raw data:")
    print(f"- {paths.raw_dir / 'activities.csv'} ({len(activities_df)} activities)")
    print(f"- {paths.raw_dir / 'daily_metrics.csv'} ({len(metrics_df)} channel-days)")


if __name__ == "__main__":
    main()
