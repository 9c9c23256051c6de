from __future__ import annotations

import streamlit as st

from app.data_access import load_activity_daily, load_activity_reports, load_attribution_shares
from app.ui_utils import confidence_badge, fmt_decimal, fmt_money, fmt_num, fmt_pct

st.title("Activity Deep Dive")

reports = load_activity_reports()
shares = load_attribution_shares()
daily = load_activity_daily()
if reports.empty:
    st.stop()

sel_channel = st.session_state.get("selected_channel")
if sel_channel:
    reports = reports[reports["channel"] == sel_channel]

activities = reports["activity_id"].dropna().unique().tolist()
if not activities:
    st.warning("No activities after filters.")
    st.stop()

default = st.session_state.get("selected_activity") or activities[0]
act = st.selectbox("Select activity", activities, index=activities.index(default) if default in activities else 0)

row = reports[reports["activity_id"] == act].iloc[0]

st.markdown("### Summary")
st.write(f"**{row['partner_name']}** ({row['channel']}, {row['status']}), window "
         f"{row['post_window_start']} → {row['post_window_end']} ({int(row['post_window_days'])} days)")
st.write(f"**Confidence:** {confidence_badge(row['confidence'])}, {row['confidence_explanation']}")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Observed signups", fmt_num(float(row["observed_signups"])))
c2.metric("Expected signups", fmt_decimal(float(row["expected_signups"])))
c3.metric("Incremental signups", fmt_decimal(float(row["incremental_signups"])))
c4.metric("Cost / incremental", fmt_money(row["cost_per_incremental_signup"]))

st.markdown("### Baseline")
c5, c6, c7, c8 = st.columns(4)
c5.metric("Baseline signups / day", fmt_decimal(float(row["baseline_avg"])))
c6.metric("Baseline σ", fmt_decimal(float(row["baseline_stddev"])))
c7.metric("Clean days used", fmt_num(int(row["baseline_days"])))
c8.metric("Tracked floor", fmt_num(float(row["floor_signups"])))
st.caption(f"Clean baseline days span {row['baseline_window_start']} → {row['baseline_window_end']}.")
if int(row["below_floor_flag"]) == 1:
    st.warning("Incremental signups are below the deterministically tracked signups for this activity.")

st.markdown("### Daily signups (baseline vs. observation window)")
d = daily[daily["activity_id"] == act]
if d.empty:
    st.warning("No daily data for this activity.")
else:
    st.line_chart(d.pivot_table(index="date", columns="period", values="signups"))

st.markdown("### Day-by-day credit split")
s = shares[shares["activity_id"] == act].copy()
if s.empty:
    st.info("No attribution entries (activity is not live).")
    st.stop()

s["share"] = s["share"].map(fmt_pct)
st.dataframe(s.drop(columns=["activity_id", "channel"]), use_container_width=True)
