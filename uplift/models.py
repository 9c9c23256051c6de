from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Literal, Mapping, Optional, Tuple

from uplift.stats import Confidence

LIVE = "live"
BOOKED = "booked"
CANCELED = "canceled"
STATUSES = (LIVE, BOOKED, CANCELED)

ClickSource = Literal["actual", "deterministic", "estimated"]

# reporter(event_name, payload)
Reporter = Callable[[str, Mapping[str, Any]], None]


@dataclass(frozen=True)
class Activity:
    id: str
    channel: str
    date: str
    status: str
    cost_usd: Optional[float] = None
    actual_clicks: Optional[float] = None
    deterministic_clicks: Optional[float] = None
    deterministic_tracked_signups: Optional[float] = None
    metadata: Mapping[str, float] = field(default_factory=dict, hash=False)
    activity_type: str = ""
    partner_name: str = ""
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @property
    def is_live(self) -> bool:
        return self.status == LIVE


@dataclass(frozen=True)
class DailyMetric:
    date: str
    channel: str
    signups: int
    activations: int


@dataclass(frozen=True)
class ClickCount:
    clicks: Optional[float]
    source: Optional[ClickSource]


@dataclass(frozen=True)
class DailyBaseline:
    date: str
    signups: float
    activations: float
    signups_sigma: float
    # most recent first
    clean_days: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DailyAttributionShare:
    date: str
    pooled_signups: float
    pooled_activations: float
    my_clicks: float
    total_clicks: float
    share: float
    attributed_signups: float
    attributed_activations: float
    overlapping_activities: Tuple[str, ...]


@dataclass(frozen=True)
class DayDataPoint:
    date: str
    signups: Optional[int]
    activations: Optional[int]
    is_baseline: bool
    is_post_window: bool


@dataclass(frozen=True)
class ActivityReport:
    activity: Activity

    baseline_window_start: str
    baseline_window_end: str
    baseline_avg: float
    baseline_activations_avg: float
    baseline_stddev: float
    baseline_days: int

    post_window_start: str
    post_window_end: str
    post_window_days: int

    observed_signups: float
    expected_signups: float
    incremental_signups: float

    observed_activations: float
    expected_activations: float
    incremental_activations: float

    # surplus over baseline across the window before it is split
    raw_pooled_signups: float
    raw_pooled_activations: float

    floor_signups: float
    clicks_used: Optional[float]
    clicks_source: Optional[ClickSource]

    confidence: Confidence
    confidence_explanation: str

    daily_shares: Tuple[DailyAttributionShare, ...] = ()
    daily_data: Tuple[DayDataPoint, ...] = ()

    @property
    def below_floor(self) -> bool:
        """True when attribution credits fewer signups than were tracked directly.

        The floor is reported but never enforced.
        """
        return self.incremental_signups < self.floor_signups

    @property
    def cost_per_incremental_signup(self) -> Optional[float]:
        cost = self.activity.cost_usd
        if cost is None or self.incremental_signups <= 0:
            return None
        return cost / self.incremental_signups
