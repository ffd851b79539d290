"""User config API endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db import get_db
from chronos.features.config.repository import ConfigRepository
from chronos.features.config.schemas import UpdateConfigRequest
from chronos.features.users.repository import UserRepository
from chronos.models.app_config import AppConfig
from chronos.services.timer.timer_manager import TimerManager, get_timer_manager

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("", response_model=AppConfig, response_model_by_alias=True)
async def get_config(
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Get timer durations and feature flags for a user.

    Users that never saved a config get the defaults.
    """
    try:
        await manager.settle(user_id)
        repo = ConfigRepository(db)
        config = await repo.get(user_id)
        return config or AppConfig()

    except Exception as e:
        logger.error(f"Failed to fetch config for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("", response_model=AppConfig, response_model_by_alias=True)
async def update_config(
    request: UpdateConfigRequest,
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Upsert the config of a user. A hosted timer adopts the new durations and
    flags as if they were changed in its settings.

    Returns:
        The stored config
    """
    try:
        await manager.settle(request.user_id)
        await UserRepository(db).ensure(request.user_id)
        repo = ConfigRepository(db)
        config = await repo.upsert(request.user_id, request.config)
        manager.config_stored(request.user_id, config)
        return config

    except Exception as e:
        logger.error(f"Failed to update config for user {request.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
