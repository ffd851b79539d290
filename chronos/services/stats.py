"""Derived statistics over completed sessions"""
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from chronos.models.session import SessionRecord
from chronos.models.stats import DailyFocus, SessionStats, TopicShare
from chronos.models.timer import TimerMode

UNSPECIFIED_TOPIC = "Unspecified"


def _focus_records(records: Sequence[SessionRecord]) -> List[SessionRecord]:
    return [r for r in records if r.mode == TimerMode.FOCUS]


def weekly_focus_minutes(
    records: Sequence[SessionRecord],
    now: Optional[datetime] = None,
    days: int = 7,
) -> List[DailyFocus]:
    """
    Focus minutes per calendar day (UTC) for the last `days` days, oldest first.

    Args:
        records: Completed sessions
        now: Reference time, defaults to the current time
        days: Window length including today

    Returns:
        One entry per day named by short weekday ("Mon")
    """
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    seconds_per_day = {day: 0 for day in window}
    for record in _focus_records(records):
        day = record.completed_at.date()
        if day in seconds_per_day:
            seconds_per_day[day] += record.duration_seconds

    return [
        DailyFocus(name=day.strftime("%a"), minutes=round(seconds_per_day[day] / 60))
        for day in window
    ]


def topic_distribution(records: Sequence[SessionRecord], limit: int = 5) -> List[TopicShare]:
    """Focus minutes per topic, largest first, blank topics grouped as "Unspecified" """
    seconds_per_topic: Counter = Counter()
    for record in _focus_records(records):
        topic = record.topic.strip() or UNSPECIFIED_TOPIC
        seconds_per_topic[topic] += record.duration_seconds

    return [
        TopicShare(name=topic, value=round(seconds / 60))
        for topic, seconds in seconds_per_topic.most_common(limit)
    ]


def build_stats(records: Sequence[SessionRecord], now: Optional[datetime] = None) -> SessionStats:
    focus = _focus_records(records)
    total_seconds = sum(r.duration_seconds for r in focus)
    return SessionStats(
        weekly=weekly_focus_minutes(records, now),
        topics=topic_distribution(records),
        total_focus_hours=round(total_seconds / 3600, 1),
        total_focus_sessions=len(focus),
    )
