"""SQLAlchemy repository for user config"""

import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db.models.user_config import UserConfig as UserConfigORM
from chronos.models.app_config import AppConfig, FeatureFlags, Theme
from chronos.models.timer import DEFAULT_TIMERS
from chronos.utils.serialization import to_jsonable

logger = logging.getLogger(__name__)


class ConfigRepository:
    """Repository for the one-row-per-user config table"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def _get_row(self, user_id: str) -> Optional[UserConfigORM]:
        result = await self.db.execute(
            select(UserConfigORM).where(UserConfigORM.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: str) -> Optional[AppConfig]:
        """
        Get the stored config for a user.

        Returns:
            AppConfig, or None when the user never saved one
        """
        row = await self._get_row(user_id)
        if row is None:
            return None
        return self._to_domain_model(row)

    async def upsert(self, user_id: str, config: AppConfig) -> AppConfig:
        """
        Insert or replace the timers and feature flags of a user.

        Args:
            user_id: Owner id
            config: Validated config

        Returns:
            The stored config
        """
        row = await self._get_row(user_id)
        timers = to_jsonable(config.timers)
        feature_flags = to_jsonable(config.feature_flags)

        if row is None:
            row = UserConfigORM(user_id=user_id, timers=timers, feature_flags=feature_flags)
            self.db.add(row)
        else:
            row.timers = timers
            row.feature_flags = feature_flags

        await self.db.commit()
        await self.db.refresh(row)
        return self._to_domain_model(row)

    async def get_theme(self, user_id: str) -> Optional[Theme]:
        row = await self._get_row(user_id)
        if row is None or not row.theme:
            return None
        return Theme(row.theme)

    async def set_theme(self, user_id: str, theme: Theme) -> None:
        """Store the theme, creating a default config row when needed"""
        row = await self._get_row(user_id)
        if row is None:
            row = UserConfigORM(
                user_id=user_id,
                timers=to_jsonable(DEFAULT_TIMERS),
                feature_flags=to_jsonable(FeatureFlags()),
                theme=theme.value,
            )
            self.db.add(row)
        else:
            row.theme = theme.value
        await self.db.commit()

    @staticmethod
    def _to_domain_model(row: UserConfigORM) -> AppConfig:
        return AppConfig.model_validate({
            "timers": row.timers or {},
            "featureFlags": row.feature_flags or {},
        })
