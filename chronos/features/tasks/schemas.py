"""Request schemas for the tasks API"""

from datetime import date
from typing import List, Optional

from pydantic import AliasChoices, Field

from chronos.models.base import CamelModel
from chronos.models.task import TaskEntry, TaskPriority, TaskStatus
from chronos.utils.ids import now_ms


class TaskPayload(CamelModel):
    """
    Task as sent by clients.

    Accepts both the planner field names (`text`, `targetDate`) and the
    table column names (`title`, `dueDate`).
    """
    id: str = Field(min_length=1)
    text: str = Field(min_length=1, validation_alias=AliasChoices("text", "title"))
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: Optional[TaskPriority] = None
    tags: List[str] = Field(default_factory=list)
    start_date: Optional[int] = None
    target_date: Optional[date] = Field(
        None, validation_alias=AliasChoices("targetDate", "target_date", "dueDate", "due_date")
    )

    def to_entry(self, task_id: Optional[str] = None) -> TaskEntry:
        return TaskEntry(
            id=task_id or self.id,
            text=self.text,
            description=self.description,
            status=self.status,
            priority=self.priority or TaskPriority.MEDIUM,
            tags=self.tags,
            start_date=self.start_date if self.start_date is not None else now_ms(),
            target_date=self.target_date,
        )


class TaskWriteRequest(CamelModel):
    """Body of POST and PUT /api/tasks"""
    user_id: str = Field(min_length=1)
    task: TaskPayload


class DeleteTaskResponse(CamelModel):
    success: bool = True
