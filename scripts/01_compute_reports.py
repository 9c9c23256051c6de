from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import pandas as pd


def _project_root_from_this_file(this_file: Path) -> Path:
    return this_file.resolve().parents[1]


PROJECT_ROOT = _project_root_from_this_file(Path(__file__))
sys.path.insert(0, str(PROJECT_ROOT))

from uplift.config import UpliftConfig, load_settings  # noqa: E402
from uplift.reports import compute_all_reports  # noqa: E402
from uplift.tables import (  # noqa: E402
    activities_from_frame,
    daily_points_to_frame,
    metrics_from_frame,
    reports_to_frame,
    shares_to_frame,
    summarize_channels,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Paths:
    project_root: Path
    raw_dir: Path
    marts_dir: Path

    @staticmethod
    def from_config(project_root: Path, cfg: dict) -> "Paths":
        out = cfg.get("output", {})
        raw_dir = project_root / out.get("raw_dir", "data/raw")
        marts_dir = project_root / out.get("marts_dir", "data/marts")
        return Paths(project_root, raw_dir, marts_dir)

    def ensure(self) -> None:
        self.marts_dir.mkdir(parents=True, exist_ok=True)


def _read_required_csv(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Missing required dataset: {path}")
    # ids and dates stay as written
    return pd.read_csv(path, dtype={"id": str, "date": str})


def _log_event(event: str, payload: dict) -> None:
    if event == "channel.completed":
        logger.info(
            "%s: %d activities, %.1f incremental signups, %.1f incremental activations",
            payload["channel"], payload["activities"],
            payload["incremental_signups"], payload["incremental_activations"],
        )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    cfg = load_settings(PROJECT_ROOT)
    config = UpliftConfig.from_config(cfg)
    paths = Paths.from_config(PROJECT_ROOT, cfg)
    paths.ensure()

    activities = activities_from_frame(_read_required_csv(paths.raw_dir / "activities.csv"))
    metrics = metrics_from_frame(_read_required_csv(paths.raw_dir / "daily_metrics.csv"))
    logger.info("Loaded %d activities and %d daily metric rows", len(activities), len(metrics))

    reports = compute_all_reports(activities, metrics, config, reporter=_log_event)

    reports_df = reports_to_frame(reports)
    shares_df = shares_to_frame(reports)
    daily_df = daily_points_to_frame(reports)
    summary_df = summarize_channels(reports_df)

    reports_path = paths.marts_dir / "mart_activity_reports.csv"
    shares_path = paths.marts_dir / "mart_attribution_shares.csv"
    daily_path = paths.marts_dir / "mart_activity_daily.csv"
    summary_path = paths.marts_dir / "mart_channel_summary.csv"

    reports_df.to_csv(reports_path, index=False)
    shares_df.to_csv(shares_path, index=False)
    daily_df.to_csv(daily_path, index=False)
    summary_df.to_csv(summary_path, index=False)

    print("✅ Uplift marts written:")
    print(f"- {reports_path}")
    print(f"- {shares_path}")
    print(f"- {daily_path}")
    print(f"- {summary_path}")


if __name__ == "__main__":
    main()
