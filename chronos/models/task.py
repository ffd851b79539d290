"""Planner task domain model"""
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field, computed_field

from .base import CamelModel


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskEntry(CamelModel):
    """Backlog task. Persists across sessions and is snapshotted into each SessionRecord."""
    id: str
    text: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    start_date: int  # epoch ms
    target_date: Optional[date] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def completed(self) -> bool:
        return self.status == TaskStatus.DONE


class TaskProgress(CamelModel):
    """Completion summary of the backlog"""
    done: int
    total: int
    percent: int
    by_status: Dict[TaskStatus, int]
