"""Tasks API endpoints"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from chronos.db import get_db
from chronos.features.tasks.schemas import DeleteTaskResponse, TaskWriteRequest
from chronos.features.tasks.service import TaskAlreadyExistsError, TaskService
from chronos.models.task import TaskEntry
from chronos.services.timer.timer_manager import TimerManager, get_timer_manager

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskEntry], response_model_by_alias=True)
async def list_tasks(
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """Get every task of a user, newest first"""
    try:
        await manager.settle(user_id)
        service = TaskService(db)
        return await service.list_tasks(user_id)

    except Exception as e:
        logger.error(f"Failed to fetch tasks for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", status_code=201, response_model=TaskEntry, response_model_by_alias=True)
async def create_task(
    request: TaskWriteRequest,
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Create a task. A hosted timer of the user picks it up immediately.

    Raises:
        409: Task id already taken
        500: Server error during processing
    """
    try:
        await manager.settle(request.user_id)
        service = TaskService(db)
        task = await service.create_task(request.user_id, request.task)
        manager.task_stored(request.user_id, task)
        return task

    except TaskAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create task for user {request.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("", response_model=TaskEntry, response_model_by_alias=True)
async def update_task(
    request: TaskWriteRequest,
    task_id: str = Query(..., alias="id", min_length=1),
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Replace a task owned by the user.

    Raises:
        404: The user owns no task with this id
        500: Server error during processing
    """
    try:
        await manager.settle(request.user_id)
        service = TaskService(db)
        task = await service.update_task(task_id, request.user_id, request.task)
        manager.task_stored(request.user_id, task)
        return task

    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update task {task_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("", response_model=DeleteTaskResponse)
async def delete_task(
    task_id: str = Query(..., alias="id", min_length=1),
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_db),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Delete a task owned by the user.

    Raises:
        404: The user owns no task with this id
        500: Server error during processing
    """
    try:
        await manager.settle(user_id)
        service = TaskService(db)
        await service.delete_task(task_id, user_id)
        manager.task_deleted(user_id, task_id)
        return DeleteTaskResponse(success=True)

    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to delete task {task_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
