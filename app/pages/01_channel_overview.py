from __future__ import annotations

import streamlit as st

from app.data_access import load_activity_reports, load_channel_summary
from app.ui_utils import confidence_badge, decision_label, fmt_decimal, fmt_money, fmt_num

st.title("Channel Overview")

df = load_activity_reports()
summary = load_channel_summary()
if df.empty:
    st.stop()

sel_channel = st.session_state.get("selected_channel")
if sel_channel:
    df = df[df["channel"] == sel_channel]
    summary = summary[summary["channel"] == sel_channel]

if df.empty:
    st.warning("No data after filters.")
    st.stop()

live = df[df["status"] == "live"]

c1, c2, c3, c4 = st.columns(4)
c1.metric("Live activities", fmt_num(len(live)))
c2.metric("Incremental signups", fmt_decimal(live["incremental_signups"].sum()))
c3.metric("Incremental activations", fmt_decimal(live["incremental_activations"].sum()))
spend = live["cost_usd"].sum()
incr = live["incremental_signups"].sum()
c4.metric("Cost / incremental signup", fmt_money(spend / incr) if incr > 0 else "—")

st.markdown("### Channel totals")
st.dataframe(summary, use_container_width=True)

st.markdown("### Ranked activities")
df = df.sort_values("incremental_signups", ascending=False).copy()
df["decision"] = df.apply(
    lambda r: decision_label(str(r["status"]), float(r["incremental_signups"]), str(r["confidence"])),
    axis=1,
)
show = df[[
    "activity_id", "channel", "partner_name", "date", "status",
    "observed_signups", "expected_signups", "incremental_signups",
    "incremental_activations", "clicks_used", "clicks_source",
    "cost_per_incremental_signup", "confidence", "decision",
]].copy()

show["date"] = show["date"].dt.strftime("%Y-%m-%d")
show["incremental_signups"] = show["incremental_signups"].map(fmt_decimal)
show["incremental_activations"] = show["incremental_activations"].map(fmt_decimal)
show["cost_per_incremental_signup"] = show["cost_per_incremental_signup"].map(fmt_money)
show["confidence"] = show["confidence"].map(confidence_badge)

st.dataframe(show, use_container_width=True)

st.markdown("### Incremental signups by activity")
chart_df = live[["activity_id", "incremental_signups"]].set_index("activity_id")
st.bar_chart(chart_df)

below = live[live["below_floor_flag"] == 1]
if not below.empty:
    st.warning(
        f"{len(below)} live activit{'y' if len(below) == 1 else 'ies'} received less credit than "
        "their directly tracked signups. The floor is reported, not enforced."
    )
