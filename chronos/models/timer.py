"""Timer domain models"""
from enum import Enum
from typing import Dict, Optional

from pydantic import Field

from .base import CamelModel


class TimerMode(str, Enum):
    """Timer phases"""
    FOCUS = "FOCUS"
    SHORT_BREAK = "SHORT_BREAK"
    LONG_BREAK = "LONG_BREAK"
    CUSTOM = "CUSTOM"


DEFAULT_TIMERS: Dict[TimerMode, int] = {
    TimerMode.FOCUS: 25 * 60,
    TimerMode.SHORT_BREAK: 5 * 60,
    TimerMode.LONG_BREAK: 15 * 60,
    TimerMode.CUSTOM: 20 * 60,
}

DEFAULT_CUSTOM_LABEL = "Custom Session"


class TimerState(CamelModel):
    """Mutable countdown state owned by a single TimerEngine"""
    mode: TimerMode = TimerMode.FOCUS
    remaining_seconds: int = Field(DEFAULT_TIMERS[TimerMode.FOCUS], ge=0)
    is_running: bool = False
    custom_label: Optional[str] = None  # only meaningful in CUSTOM mode
