from __future__ import annotations

import sys
from pathlib import Path
import streamlit as st

# Make imports stable regardless of where Streamlit is launched
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from app.data_access import load_activity_reports  # noqa: E402


st.set_page_config(
    page_title="Activity Uplift",
    layout="wide",
)

st.title("Marketing Activity Uplift & Attribution")
st.caption("Clean-day baselines | Pooled surplus | Click-share split")

df = load_activity_reports()
if df.empty:
    st.stop()

# Global filters (used implicitly by pages via Streamlit session state)
st.sidebar.header("Global Filters")
channels = ["All"] + sorted(df["channel"].dropna().unique().tolist())
ch = st.sidebar.selectbox("Channel", channels, index=0)
st.session_state["selected_channel"] = None if ch == "All" else ch

activities = ["All"] + df["activity_id"].dropna().unique().tolist()
sel = st.sidebar.selectbox("Activity", activities, index=0)
st.session_state["selected_activity"] = None if sel == "All" else sel

st.sidebar.markdown("---")
st.sidebar.write("Pipeline quick start:")
st.sidebar.code("python scripts/run_all.py\nstreamlit run app/app.py", language="bash")

st.markdown(
    """
This app reads **pre-computed uplift marts** and shows:
- **Channel Overview:** which activities earned incremental signups, and at what cost
- **Activity Deep Dive:** baseline, observation window and day-by-day credit split
- **Methodology:** how baselines, pools and confidence tiers are computed
"""
)

st.info("Use the left sidebar to set global filters, then navigate using the Streamlit pages menu.")
