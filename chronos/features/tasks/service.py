"""Business logic for planner tasks"""

import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.features.tasks.repository import TaskRepository
from chronos.features.tasks.schemas import TaskPayload
from chronos.features.users.repository import UserRepository
from chronos.models.task import TaskEntry

logger = logging.getLogger(__name__)


class TaskAlreadyExistsError(ValueError):
    """Raised when a task id is created twice"""


class TaskService:
    """Service layer for task business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = TaskRepository(db)
        self.users = UserRepository(db)

    async def list_tasks(self, user_id: str) -> List[TaskEntry]:
        return await self.repository.list_for_user(user_id, newest_first=True)

    async def create_task(self, user_id: str, payload: TaskPayload) -> TaskEntry:
        """
        Create a task for a user.

        Raises:
            TaskAlreadyExistsError: If the id is already taken
        """
        if await self.repository.get(payload.id) is not None:
            raise TaskAlreadyExistsError(f"Task {payload.id} already exists")

        await self.users.ensure(user_id)
        created = await self.repository.add(user_id, payload.to_entry())
        await self.db.commit()
        logger.info(f"Created task {created.id} for user {user_id}")
        return created

    async def update_task(self, task_id: str, user_id: str, payload: TaskPayload) -> TaskEntry:
        """
        Replace an owned task.

        Business rules:
        - Only the owner may update; other users see "not found"
        - The creation time of the task is kept

        Raises:
            ValueError: If the user owns no task with this id
        """
        existing = await self.repository.get_owned(task_id, user_id)
        if existing is None:
            raise ValueError(f"Task {task_id} not found")

        entry = payload.to_entry(task_id)
        updated = await self.repository.update(task_id, user_id, entry)
        await self.db.commit()
        return updated

    async def delete_task(self, task_id: str, user_id: str) -> None:
        """
        Delete an owned task.

        Raises:
            ValueError: If the user owns no task with this id
        """
        removed = await self.repository.delete(task_id, user_id)
        if not removed:
            raise ValueError(f"Task {task_id} not found")
        await self.db.commit()
        logger.info(f"Deleted task {task_id} for user {user_id}")
