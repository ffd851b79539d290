"""Business logic for session logs"""

import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.features.sessions.repository import SessionLogRepository
from chronos.features.users.repository import UserRepository
from chronos.models.session import SessionRecord
from chronos.models.stats import SessionStats
from chronos.services.stats import build_stats

logger = logging.getLogger(__name__)

RECENT_LIMIT = 100


class SessionLogService:
    """Service layer for session log business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = SessionLogRepository(db)
        self.users = UserRepository(db)

    async def recent(self, user_id: str) -> List[SessionRecord]:
        return await self.repository.list_recent(user_id, RECENT_LIMIT)

    async def record(self, user_id: str, record: SessionRecord) -> SessionRecord:
        """
        Store a completed session, creating the owning user on first write.

        Business rules:
        - Records are never updated: re-posting an id the user already owns
          returns the stored record unchanged
        - An id owned by another user is rejected

        Raises:
            ValueError: If the id belongs to another user
        """
        existing = await self.repository.get(record.id)
        if existing is not None:
            if existing.user_id != user_id:
                raise ValueError(f"Session {record.id} already exists")
            logger.info(f"Session {record.id} already stored for user {user_id}")
            return self.repository.to_domain_model(existing)

        await self.users.ensure(user_id)
        created = await self.repository.add(user_id, record)
        await self.db.commit()
        logger.info(f"Stored {record.mode.value} session {record.id} for user {user_id}")
        return created

    async def stats(self, user_id: str) -> SessionStats:
        """Derived statistics over every session of the user"""
        records = await self.repository.list_all(user_id)
        return build_stats(records)
