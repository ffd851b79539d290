"""Timer engine, transitions and scheduling"""
from .engine import TimerEngine, SwitchOutcome
from .scheduler import TickScheduler
from .transitions import NEXT_MODE, next_mode

__all__ = ['TimerEngine', 'SwitchOutcome', 'TickScheduler', 'NEXT_MODE', 'next_mode']
