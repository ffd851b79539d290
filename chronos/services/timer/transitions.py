"""Automatic mode transitions after a natural completion"""
from typing import Dict

from chronos.models.timer import TimerMode

# LONG_BREAK is only ever entered by an explicit switch
NEXT_MODE: Dict[TimerMode, TimerMode] = {
    TimerMode.FOCUS: TimerMode.SHORT_BREAK,
    TimerMode.SHORT_BREAK: TimerMode.FOCUS,
    TimerMode.LONG_BREAK: TimerMode.FOCUS,
    TimerMode.CUSTOM: TimerMode.FOCUS,
}


def next_mode(mode: TimerMode) -> TimerMode:
    return NEXT_MODE[mode]
