"""Session log API endpoints"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db import get_db
from chronos.features.sessions.schemas import CreateSessionRequest
from chronos.features.sessions.service import SessionLogService
from chronos.models.session import SessionRecord
from chronos.models.stats import SessionStats
from chronos.services.timer.timer_manager import TimerManager, get_timer_manager

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=List[SessionRecord], response_model_by_alias=True)
async def list_sessions(
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Get the latest 100 sessions of a user.

    Returns:
        Sessions ordered by timestamp, newest first
    """
    try:
        await manager.settle(user_id)
        service = SessionLogService(db)
        return await service.recent(user_id)

    except Exception as e:
        logger.error(f"Failed to fetch sessions for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", status_code=201, response_model=SessionRecord, response_model_by_alias=True)
async def create_session(
    request: CreateSessionRequest,
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Append a completed session to the user's log.

    Raises:
        409: Session id owned by another user
        500: Server error during processing
    """
    try:
        await manager.settle(request.user_id)
        service = SessionLogService(db)
        record = await service.record(request.user_id, request.session)
        manager.session_stored(request.user_id, record)
        return record

    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to store session for user {request.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/stats", response_model=SessionStats, response_model_by_alias=True)
async def get_session_stats(
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Weekly focus minutes, topic distribution and focus totals of a user.
    """
    try:
        await manager.settle(user_id)
        service = SessionLogService(db)
        return await service.stats(user_id)

    except Exception as e:
        logger.error(f"Failed to compute stats for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
