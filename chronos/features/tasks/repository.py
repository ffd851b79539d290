"""SQLAlchemy repository for planner tasks"""

import logging
from typing import List, Optional
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db.models.task import Task as TaskORM
from chronos.models.task import TaskEntry

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task operations using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def list_for_user(self, user_id: str, newest_first: bool = True) -> List[TaskEntry]:
        """
        Get every task of a user.

        Args:
            user_id: Owner id
            newest_first: Order by creation time descending (API order) or ascending (backlog order)

        Returns:
            List of TaskEntry domain models
        """
        order = TaskORM.start_date.desc() if newest_first else TaskORM.start_date.asc()
        tie = TaskORM.id.desc() if newest_first else TaskORM.id.asc()
        stmt = select(TaskORM).where(TaskORM.user_id == user_id).order_by(order, tie)
        result = await self.db.execute(stmt)
        return [self.to_domain_model(row) for row in result.scalars().all()]

    async def get(self, task_id: str) -> Optional[TaskORM]:
        result = await self.db.execute(select(TaskORM).where(TaskORM.id == task_id))
        return result.scalar_one_or_none()

    async def get_owned(self, task_id: str, user_id: str) -> Optional[TaskORM]:
        stmt = select(TaskORM).where(TaskORM.id == task_id, TaskORM.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, user_id: str, task: TaskEntry) -> TaskEntry:
        """Stage a new task row. The caller commits."""
        row = TaskORM(id=task.id, user_id=user_id)
        self._apply(row, task)
        row.start_date = task.start_date
        self.db.add(row)
        await self.db.flush()
        return self.to_domain_model(row)

    async def update(self, task_id: str, user_id: str, task: TaskEntry) -> Optional[TaskEntry]:
        """
        Replace the editable fields of an owned task. The caller commits.

        Returns:
            Updated TaskEntry, or None when the user owns no such task
        """
        row = await self.get_owned(task_id, user_id)
        if row is None:
            return None
        self._apply(row, task)
        await self.db.flush()
        return self.to_domain_model(row)

    async def delete(self, task_id: str, user_id: str) -> bool:
        """
        Delete an owned task. The caller commits.

        Returns:
            True when a row was removed
        """
        result = await self.db.execute(
            delete(TaskORM).where(TaskORM.id == task_id, TaskORM.user_id == user_id)
        )
        return (result.rowcount or 0) > 0

    async def sync_backlog(self, user_id: str, tasks: List[TaskEntry]) -> None:
        """
        Make the stored tasks of a user equal to `tasks`.

        Rows missing from `tasks` are deleted, the others inserted or updated.
        Commits once at the end.
        """
        existing = {row.id: row for row in (
            await self.db.execute(select(TaskORM).where(TaskORM.user_id == user_id))
        ).scalars().all()}
        wanted = {task.id: task for task in tasks}

        for task_id, row in existing.items():
            if task_id not in wanted:
                await self.db.delete(row)

        for task_id, task in wanted.items():
            row = existing.get(task_id)
            if row is None:
                row = TaskORM(id=task.id, user_id=user_id, start_date=task.start_date)
                self.db.add(row)
            self._apply(row, task)

        await self.db.commit()
        logger.debug(f"Synced {len(wanted)} tasks for user {user_id}")

    @staticmethod
    def _apply(row: TaskORM, task: TaskEntry) -> None:
        row.title = task.text
        row.description = task.description
        row.status = task.status.value
        row.priority = task.priority.value
        row.due_date = task.target_date
        row.tags = list(task.tags)

    @staticmethod
    def to_domain_model(row: TaskORM) -> TaskEntry:
        return TaskEntry.model_validate({
            "id": row.id,
            "text": row.title,
            "description": row.description,
            "status": row.status,
            "priority": row.priority or "MEDIUM",
            "tags": row.tags or [],
            "startDate": row.start_date,
            "targetDate": row.due_date,
        })
