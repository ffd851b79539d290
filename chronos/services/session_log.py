"""Append-only in-memory session log"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from chronos.models.session import SessionRecord
from chronos.models.timer import TimerMode
from chronos.utils.datetime_helper import to_epoch_ms

logger = logging.getLogger(__name__)


class SessionLogStore:
    """
    Ordered record of completed sessions.

    Insertion order is chronological order. Records are never mutated or
    removed; aggregates are recomputed on every call.
    """

    def __init__(self):
        self._records: List[SessionRecord] = []

    def load(self, records: Iterable[SessionRecord]) -> None:
        """Seed the log from persisted history. Only valid on an empty log."""
        if self._records:
            raise ValueError("Session log already has records")
        self._records.extend(records)
        logger.info(f"Loaded {len(self._records)} sessions")

    def append(self, record: SessionRecord) -> None:
        self._records.append(record)

    def read_all(self) -> List[SessionRecord]:
        """All records in insertion order (a new list; the log is unchanged)"""
        return list(self._records)

    def recent(self, limit: Optional[int] = None) -> List[SessionRecord]:
        """
        Records ordered by timestamp, newest first.

        Args:
            limit: Maximum number of records, or None for all

        Returns:
            A sorted view; storage order is untouched
        """
        ordered = sorted(self._records, key=lambda r: r.timestamp, reverse=True)
        return ordered if limit is None else ordered[:limit]

    def _select(
        self,
        mode: Optional[TimerMode],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[SessionRecord]:
        start_ms = to_epoch_ms(start) if start else None
        end_ms = to_epoch_ms(end) if end else None
        return [
            r for r in self._records
            if (mode is None or r.mode == mode)
            and (start_ms is None or r.timestamp >= start_ms)
            and (end_ms is None or r.timestamp < end_ms)
        ]

    def total_duration(
        self,
        mode: Optional[TimerMode] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        """Sum of configured durations in seconds, filtered by mode and [start, end)"""
        return sum(r.duration_seconds for r in self._select(mode, start, end))

    def count(
        self,
        mode: Optional[TimerMode] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        return len(self._select(mode, start, end))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: str) -> bool:
        return any(r.id == record_id for r in self._records)
