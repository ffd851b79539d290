"""SQLAlchemy repository for session logs"""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db.models.session_log import SessionLog as SessionLogORM
from chronos.models.session import SessionRecord
from chronos.utils.serialization import to_jsonable

logger = logging.getLogger(__name__)


class SessionLogRepository:
    """Insert-only repository for completed sessions"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def list_recent(self, user_id: str, limit: int = 100) -> List[SessionRecord]:
        """
        Get the latest sessions of a user.

        Args:
            user_id: Owner id
            limit: Maximum number of records

        Returns:
            Records ordered by timestamp, newest first
        """
        stmt = (
            select(SessionLogORM)
            .where(SessionLogORM.user_id == user_id)
            .order_by(SessionLogORM.timestamp.desc(), SessionLogORM.id.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [self.to_domain_model(row) for row in result.scalars().all()]

    async def list_all(self, user_id: str) -> List[SessionRecord]:
        """All sessions of a user in chronological order"""
        stmt = (
            select(SessionLogORM)
            .where(SessionLogORM.user_id == user_id)
            .order_by(SessionLogORM.timestamp.asc(), SessionLogORM.id.asc())
        )
        result = await self.db.execute(stmt)
        return [self.to_domain_model(row) for row in result.scalars().all()]

    async def get(self, session_id: str) -> Optional[SessionLogORM]:
        result = await self.db.execute(select(SessionLogORM).where(SessionLogORM.id == session_id))
        return result.scalar_one_or_none()

    async def add(self, user_id: str, record: SessionRecord) -> SessionRecord:
        """
        Stage a new session row. The caller commits.

        Args:
            user_id: Owner id
            record: Completed session

        Returns:
            The record as it will be stored
        """
        row = SessionLogORM(
            id=record.id,
            user_id=user_id,
            timestamp=record.timestamp,
            duration_seconds=record.duration_seconds,
            mode=record.mode.value,
            session_label=record.session_label,
            topic=record.topic,
            tags=list(record.tags),
            resources=to_jsonable(record.resources),
            tasks=to_jsonable(record.tasks),
        )
        self.db.add(row)
        await self.db.flush()
        return self.to_domain_model(row)

    @staticmethod
    def to_domain_model(row: SessionLogORM) -> SessionRecord:
        return SessionRecord.model_validate({
            "id": row.id,
            "timestamp": row.timestamp,
            "durationSeconds": row.duration_seconds,
            "mode": row.mode,
            "sessionLabel": row.session_label,
            "topic": row.topic or "",
            "tags": row.tags or [],
            "resources": row.resources or [],
            "tasks": row.tasks or [],
        })
