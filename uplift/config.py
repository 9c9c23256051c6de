from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml

DEFAULT_BASELINE_WINDOW_DAYS = 14
DEFAULT_POST_WINDOW_DAYS = 7
DEFAULT_BASELINE_LOOKBACK_DAYS = 60


def load_settings(project_root: Path) -> dict:
    cfg_path = project_root / "config" / "settings.yaml"
    if not cfg_path.exists():
        raise FileNotFoundError(f"Missing config file: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class UpliftConfig:
    baseline_window_days: int = DEFAULT_BASELINE_WINDOW_DAYS
    post_window_days: int = DEFAULT_POST_WINDOW_DAYS
    channel_window_overrides: Mapping[str, int] = field(default_factory=dict, hash=False)
    baseline_lookback_days: int = DEFAULT_BASELINE_LOOKBACK_DAYS

    def __post_init__(self) -> None:
        overrides = {str(k): int(v) for k, v in dict(self.channel_window_overrides).items()}
        object.__setattr__(self, "channel_window_overrides", MappingProxyType(overrides))

    def window_days_for(self, channel: str) -> int:
        return self.channel_window_overrides.get(channel, self.post_window_days)

    @staticmethod
    def from_config(cfg: dict) -> "UpliftConfig":
        section = cfg.get("uplift", {}) or {}
        config = UpliftConfig(
            baseline_window_days=int(section.get("baseline_window_days", DEFAULT_BASELINE_WINDOW_DAYS)),
            post_window_days=int(section.get("post_window_days", DEFAULT_POST_WINDOW_DAYS)),
            channel_window_overrides=section.get("channel_window_overrides") or {},
            baseline_lookback_days=int(section.get("baseline_lookback_days", DEFAULT_BASELINE_LOOKBACK_DAYS)),
        )
        _validate(config)
        return config


def _validate(config: UpliftConfig) -> None:
    # The engine trusts its config; settings files are checked here instead.
    if config.baseline_window_days <= 0:
        raise ValueError(f"baseline_window_days must be positive, got {config.baseline_window_days}")
    if config.post_window_days <= 0:
        raise ValueError(f"post_window_days must be positive, got {config.post_window_days}")
    if config.baseline_lookback_days < config.baseline_window_days:
        raise ValueError(
            "baseline_lookback_days must be at least baseline_window_days "
            f"({config.baseline_lookback_days} < {config.baseline_window_days})"
        )
    for channel, days in config.channel_window_overrides.items():
        if days <= 0:
            raise ValueError(f"Window override for channel '{channel}' must be positive, got {days}")
