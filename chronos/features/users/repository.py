"""SQLAlchemy repository for users"""

import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db.models.user import User as UserORM

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user rows"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def get(self, user_id: str) -> Optional[UserORM]:
        result = await self.db.execute(select(UserORM).where(UserORM.id == user_id))
        return result.scalar_one_or_none()

    async def ensure(self, user_id: str, email: Optional[str] = None) -> UserORM:
        """
        Create the user row if it does not exist yet.

        The caller commits; an existing row is returned untouched.

        Args:
            user_id: Owner id sent by the client
            email: Optional email, "unknown" when not given

        Returns:
            The existing or newly added user
        """
        user = await self.get(user_id)
        if user is not None:
            return user

        user = UserORM(id=user_id, email=email or "unknown")
        self.db.add(user)
        await self.db.flush()
        logger.info(f"Created user {user_id}")
        return user
