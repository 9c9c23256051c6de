from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import pandas as pd
import streamlit as st


def _project_root_from_this_file(this_file: Path) -> Path:
    # app/data_access.py -> project root is parent of "app"
    return this_file.resolve().parents[1]


@dataclass(frozen=True)
class DataPaths:
    project_root: Path
    marts_dir: Path

    @staticmethod
    def default() -> "DataPaths":
        root = _project_root_from_this_file(Path(__file__))
        return DataPaths(project_root=root, marts_dir=root / "data" / "marts")


def _missing_hint() -> str:
    return (
        "Required data not found. Run the pipeline from the project root:\n"
        "1) python scripts/run_all.py\n"
        "2) streamlit run app/app.py\n"
    )


def _load_mart(name: str) -> pd.DataFrame:
    p = DataPaths.default().marts_dir / name
    if not p.exists():
        st.error(_missing_hint())
        return pd.DataFrame()
    return pd.read_csv(p, dtype={"activity_id": str})


@st.cache_data(show_spinner=False)
def load_activity_reports() -> pd.DataFrame:
    df = _load_mart("mart_activity_reports.csv")
    if "date" in df.columns:
        df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


@st.cache_data(show_spinner=False)
def load_attribution_shares() -> pd.DataFrame:
    return _load_mart("mart_attribution_shares.csv")


@st.cache_data(show_spinner=False)
def load_activity_daily() -> pd.DataFrame:
    return _load_mart("mart_activity_daily.csv")


@st.cache_data(show_spinner=False)
def load_channel_summary() -> pd.DataFrame:
    return _load_mart("mart_channel_summary.csv")
