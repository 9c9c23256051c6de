from __future__ import annotations

from typing import Any, List, Mapping, Tuple

import pytest

from uplift.config import UpliftConfig


class RecordingReporter:
    def __init__(self) -> None:
        self.events: List[Tuple[str, dict]] = []

    def __call__(self, event: str, payload: Mapping[str, Any]) -> None:
        self.events.append((event, dict(payload)))

    def named(self, event: str) -> List[dict]:
        return [p for e, p in self.events if e == event]


@pytest.fixture
def config() -> UpliftConfig:
    return UpliftConfig(baseline_window_days=14, post_window_days=7)


@pytest.fixture
def newsletter_config() -> UpliftConfig:
    return UpliftConfig(
        baseline_window_days=14,
        post_window_days=7,
        channel_window_overrides={"newsletter": 2, "podcast": 5},
    )


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
