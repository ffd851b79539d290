"""Session log domain models"""
from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import ConfigDict, Field, field_validator

from .base import CamelModel
from .resource import ResourceEntry
from .task import TaskEntry
from .timer import TimerMode


def _ordered_unique(tags) -> Tuple[str, ...]:
    seen = []
    for tag in tags:
        if tag not in seen:
            seen.append(tag)
    return tuple(seen)


class SessionContext(CamelModel):
    """Topic and tags the user is working against when a session completes"""
    topic: str = ""
    tags: Tuple[str, ...] = ()

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: Tuple[str, ...]) -> Tuple[str, ...]:
        return _ordered_unique(tags)


class SessionRecord(CamelModel):
    """Completed session. Immutable once appended to the log."""
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int  # epoch ms of completion
    duration_seconds: int = Field(ge=0)  # configured duration, not elapsed time
    mode: TimerMode
    session_label: Optional[str] = None
    topic: str = ""
    tags: Tuple[str, ...] = ()
    resources: Tuple[ResourceEntry, ...] = ()
    tasks: Tuple[TaskEntry, ...] = ()

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: Tuple[str, ...]) -> Tuple[str, ...]:
        return _ordered_unique(tags)

    @property
    def completed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)
