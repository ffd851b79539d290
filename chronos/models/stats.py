"""Derived session statistics"""
from typing import List

from .base import CamelModel


class DailyFocus(CamelModel):
    name: str  # short weekday, e.g. "Mon"
    minutes: int


class TopicShare(CamelModel):
    name: str
    value: int  # minutes


class SessionStats(CamelModel):
    weekly: List[DailyFocus]
    topics: List[TopicShare]
    total_focus_hours: float
    total_focus_sessions: int
