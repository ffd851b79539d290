"""Application configuration model (timer durations + feature flags)"""
from enum import Enum
from typing import Any, Dict

from pydantic import Field, field_validator

from .base import CamelModel
from .timer import DEFAULT_TIMERS, TimerMode


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_THEME = Theme.DARK


class FeatureFlags(CamelModel):
    experimental_ai: bool = Field(True, alias="experimentalAI")
    slack_integration: bool = False
    planner_integration: bool = True


class AppConfig(CamelModel):
    """Persisted under the `config` key and served by /api/config"""
    feature_flags: FeatureFlags = Field(default_factory=FeatureFlags)
    timers: Dict[TimerMode, int] = Field(default_factory=lambda: dict(DEFAULT_TIMERS))

    @field_validator("timers", mode="before")
    @classmethod
    def normalise_mode_keys(cls, timers: Any) -> Any:
        """Accept lower-case mode keys such as `short_break`"""
        if isinstance(timers, dict):
            return {k.upper() if isinstance(k, str) else k: v for k, v in timers.items()}
        return timers

    @field_validator("timers")
    @classmethod
    def fill_missing_modes(cls, timers: Dict[TimerMode, int]) -> Dict[TimerMode, int]:
        """Every mode must carry a positive duration; absent modes take the default"""
        for mode, seconds in timers.items():
            if seconds <= 0:
                raise ValueError(f"Duration for {mode.value} must be positive")
        merged = dict(DEFAULT_TIMERS)
        merged.update(timers)
        return merged
