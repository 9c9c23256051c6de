"""Small deterministic statistics used by the baseline and confidence logic."""
from __future__ import annotations

import math
from typing import Literal, Sequence, Tuple

import numpy as np

Confidence = Literal["HIGH", "MED", "LOW"]

HIGH: Confidence = "HIGH"
MED: Confidence = "MED"
LOW: Confidence = "LOW"


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    # np.median works on a copy; the caller's sequence is left untouched
    return float(np.median(np.asarray(values, dtype=float)))


def stddev(values: Sequence[float]) -> float:
    if len(values) <= 1:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def expected_total(baseline_avg: float, window_days: int) -> float:
    return baseline_avg * window_days


def floored_incremental(observed_total: float, expected: float) -> float:
    return max(0.0, observed_total - expected)


def compute_confidence(
    incremental: float,
    sigma: float,
    window_days: int,
    baseline_days: int,
) -> Tuple[Confidence, str]:
    """Signal-to-noise tier: how many one-sigma days of noise the lift covers.

    This is a heuristic, not a significance test.
    """
    if baseline_days == 0:
        return LOW, "No baseline data available; cannot assess confidence."

    if sigma == 0:
        return LOW, (
            "Baseline standard deviation is 0 (constant signups); "
            "confidence heuristic not applicable."
        )

    sqrt_w = math.sqrt(window_days)
    high_threshold = 2 * sigma * sqrt_w
    med_threshold = 1 * sigma * sqrt_w

    if incremental > high_threshold:
        return HIGH, f"Incremental ({incremental:.1f}) > 2σ√W ({high_threshold:.1f})"
    if incremental > med_threshold:
        return MED, (
            f"Incremental ({incremental:.1f}) > 1σ√W ({med_threshold:.1f}) "
            f"but ≤ 2σ√W ({high_threshold:.1f})"
        )
    return LOW, f"Incremental ({incremental:.1f}) ≤ 1σ√W ({med_threshold:.1f})"
