from __future__ import annotations

import numpy as np


def _is_blank(x) -> bool:
    return x is None or (isinstance(x, float) and np.isnan(x))


def fmt_pct(x: float) -> str:
    if _is_blank(x):
        return "—"
    return f"{x*100:.1f}%"


def fmt_num(x: float) -> str:
    if _is_blank(x):
        return "—"
    return f"{x:,.0f}"


def fmt_decimal(x: float) -> str:
    if _is_blank(x):
        return "—"
    return f"{x:,.1f}"


def fmt_money(x: float) -> str:
    if _is_blank(x):
        return "—"
    return f"${x:,.2f}"


def confidence_badge(confidence: str) -> str:
    return {
        "HIGH": "🟢 HIGH",
        "MED": "🟡 MED",
        "LOW": "🔴 LOW",
    }.get(str(confidence), str(confidence))


def decision_label(status: str, incremental_signups: float, confidence: str) -> str:
    if status != "live":
        return "NOT LIVE"
    if confidence == "LOW":
        return "INSUFFICIENT EVIDENCE"
    if incremental_signups > 0:
        return "RE-BOOK / SCALE"
    return "STOP / INVESTIGATE"
