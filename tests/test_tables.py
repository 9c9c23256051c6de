import logging

import numpy as np
import pandas as pd
import pytest

from uplift.reports import compute_all_reports
from uplift.tables import (
    activities_from_frame,
    daily_points_to_frame,
    metrics_from_frame,
    parse_metadata,
    reports_to_frame,
    shares_to_frame,
    summarize_channels,
)

from builders import make_activity, make_metrics


def _activities_df() -> pd.DataFrame:
    return pd.DataFrame({
        "id": ["NE001", "NE002", "PO001"],
        "channel": ["newsletter", "newsletter", "podcast"],
        "date": ["2024-01-15", "2024-01-16", "2024-01-15"],
        "status": [" Live", "live", "CANCELED"],
        "cost_usd": [1000.0, np.nan, 500.0],
        "actual_clicks": [500.0, np.nan, np.nan],
        "deterministic_clicks": [np.nan, 300.0, np.nan],
        "metadata": ['{"est_clicks": 450, "subscribers": 90000}', "", "{not json"],
        "partner_name": ["TLDR", "Bytes", None],
    })


def test_activities_from_frame():
    a1, a2, p1 = activities_from_frame(_activities_df())

    assert a1.status == "live"
    assert a1.actual_clicks == 500
    assert dict(a1.metadata) == {"est_clicks": 450.0, "subscribers": 90000.0}
    assert a1.partner_name == "TLDR"
    assert a2.cost_usd is None
    assert a2.actual_clicks is None
    assert dict(a2.metadata) == {}
    assert p1.status == "canceled"
    assert p1.partner_name == ""


def test_malformed_metadata_is_logged_and_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="uplift.tables"):
        activities = activities_from_frame(_activities_df())
    assert dict(activities[2].metadata) == {}
    assert "PO001" in caplog.text


def test_parse_metadata_keeps_numeric_values_only():
    assert parse_metadata({"est_clicks": 10, "label": "x", "flag": True}) == {"est_clicks": 10.0}
    assert parse_metadata("[1, 2]") == {}
    assert parse_metadata(None) == {}


def test_activities_missing_column():
    with pytest.raises(KeyError, match="status"):
        activities_from_frame(_activities_df().drop(columns=["status"]))


def test_metrics_from_frame_drops_incomplete_rows(caplog):
    df = pd.DataFrame({
        "date": ["2024-01-01", "2024-01-02", "2024-01-03"],
        "channel": ["newsletter"] * 3,
        "signups": [10, None, 12.0],
        "activations": [3, 4, 5],
    })
    with caplog.at_level(logging.WARNING, logger="uplift.tables"):
        metrics = metrics_from_frame(df)

    assert [m.date for m in metrics] == ["2024-01-01", "2024-01-03"]
    assert metrics[1].signups == 12
    assert isinstance(metrics[1].signups, int)
    assert "Dropping 1" in caplog.text


def test_metrics_missing_column():
    with pytest.raises(KeyError, match="activations"):
        metrics_from_frame(pd.DataFrame({"date": [], "channel": [], "signups": []}))


@pytest.fixture
def reports(newsletter_config):
    metrics = make_metrics("2024-01-01", [10] * 14 + [30, 20, 10])
    activities = [
        make_activity("a", "2024-01-15", actual_clicks=500, cost_usd=1000),
        make_activity("b", "2024-01-16", actual_clicks=300, cost_usd=600),
        make_activity("c", "2024-01-16", status="booked", cost_usd=400),
    ]
    return compute_all_reports(activities, metrics, newsletter_config)


def test_reports_to_frame(reports):
    df = reports_to_frame(reports)
    assert list(df["activity_id"]) == ["a", "b", "c"]
    row = df.set_index("activity_id").loc["a"]
    assert row["incremental_signups"] == pytest.approx(20 + 10 * 500 / 800)
    assert row["clicks_source"] == "actual"
    assert row["below_floor_flag"] == 0


def test_shares_to_frame(reports):
    df = shares_to_frame(reports)
    # two window days for each live activity, none for the booked one
    assert len(df) == 4
    shared = df[df["date"] == "2024-01-16"]
    assert set(shared["overlapping_activities"]) == {"a|b"}
    assert shared["attributed_signups"].sum() == pytest.approx(10)


def test_daily_points_to_frame(reports):
    df = daily_points_to_frame(reports)
    a = df[df["activity_id"] == "a"]
    assert len(a) == 16
    assert (a["period"] == "post").sum() == 2


def test_summarize_channels(reports):
    summary = summarize_channels(reports_to_frame(reports)).set_index("channel")
    row = summary.loc["newsletter"]
    assert row["activities"] == 3
    assert row["live_activities"] == 2
    assert row["cost_usd"] == 1600
    assert row["incremental_signups"] == pytest.approx(30)
    assert row["cost_per_incremental_signup"] == pytest.approx(1600 / 30)


def test_summarize_channels_empty():
    assert summarize_channels(pd.DataFrame()).empty
