import numpy as np

from app.ui_utils import confidence_badge, decision_label, fmt_decimal, fmt_money, fmt_num, fmt_pct


def test_formatters_handle_blanks():
    for fmt in (fmt_pct, fmt_num, fmt_decimal, fmt_money):
        assert fmt(None) == "—"
        assert fmt(np.nan) == "—"


def test_formatters():
    assert fmt_pct(0.625) == "62.5%"
    assert fmt_num(12345.4) == "12,345"
    assert fmt_decimal(6.26) == "6.3"
    assert fmt_money(1600 / 30) == "$53.33"


def test_confidence_badge():
    assert confidence_badge("HIGH").endswith("HIGH")
    assert confidence_badge("unknown") == "unknown"


def test_decision_label():
    assert decision_label("booked", 0, "LOW") == "NOT LIVE"
    assert decision_label("live", 40, "LOW") == "INSUFFICIENT EVIDENCE"
    assert decision_label("live", 40, "HIGH") == "RE-BOOK / SCALE"
    assert decision_label("live", 0, "MED") == "STOP / INVESTIGATE"
