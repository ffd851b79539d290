"""State backend that writes straight through the SQLAlchemy repositories"""
import logging
from typing import Any, Dict, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chronos.db.session import SessionLocal
from chronos.features.config.repository import ConfigRepository
from chronos.features.sessions.repository import SessionLogRepository
from chronos.features.tasks.repository import TaskRepository
from chronos.features.users.repository import UserRepository
from chronos.models.app_config import AppConfig, Theme
from chronos.models.session import SessionRecord
from chronos.models.task import TaskEntry
from chronos.utils.serialization import to_jsonable

from .base import StateBackend, StateKey

logger = logging.getLogger(__name__)


class DatabaseStateBackend(StateBackend):
    """
    Used by the server-hosted timer. Each read or write opens its own session.

    - theme: user_config.theme column
    - config: user_config timers and feature flags
    - sessions: session_logs rows, only records not stored yet are inserted
    - tasks: tasks rows, synced to the full backlog on every write
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory or SessionLocal
        self._known_session_ids: Dict[str, Set[str]] = {}

    async def read(self, user_id: str, key: StateKey) -> Optional[Any]:
        async with self._session_factory() as db:
            if key == StateKey.THEME:
                theme = await ConfigRepository(db).get_theme(user_id)
                return theme.value if theme else None

            if key == StateKey.CONFIG:
                config = await ConfigRepository(db).get(user_id)
                return to_jsonable(config) if config else None

            if key == StateKey.SESSIONS:
                records = await SessionLogRepository(db).list_all(user_id)
                self._known_session_ids[user_id] = {record.id for record in records}
                return to_jsonable(records) if records else None

            if key == StateKey.TASKS:
                tasks = await TaskRepository(db).list_for_user(user_id, newest_first=False)
                return to_jsonable(tasks) if tasks else None

        return None

    async def write(self, user_id: str, key: StateKey, value: Any) -> None:
        async with self._session_factory() as db:
            await UserRepository(db).ensure(user_id)

            if key == StateKey.THEME:
                await ConfigRepository(db).set_theme(user_id, Theme(value))
            elif key == StateKey.CONFIG:
                await ConfigRepository(db).upsert(user_id, AppConfig.model_validate(value))
            elif key == StateKey.SESSIONS:
                await self._insert_new_sessions(db, user_id, value or [])
            elif key == StateKey.TASKS:
                tasks = [TaskEntry.model_validate(item) for item in value or []]
                await TaskRepository(db).sync_backlog(user_id, tasks)

    async def _insert_new_sessions(self, db: AsyncSession, user_id: str, records: list) -> None:
        known = self._known_session_ids.setdefault(user_id, set())
        repo = SessionLogRepository(db)
        added = []

        for item in records:
            record = SessionRecord.model_validate(item)
            if record.id in known:
                continue
            if await repo.get(record.id) is None:
                await repo.add(user_id, record)
            added.append(record.id)

        await db.commit()
        known.update(added)
        if added:
            logger.info(f"Stored {len(added)} new sessions for user {user_id}")
