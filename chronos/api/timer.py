"""Timer control endpoints backed by the per-user workspace"""
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from chronos.models.app_config import Theme
from chronos.models.base import CamelModel
from chronos.models.resource import ResourceEntry, ResourceType
from chronos.models.task import TaskEntry, TaskPriority, TaskStatus
from chronos.models.timer import TimerMode
from chronos.services.timer.engine import SwitchOutcome
from chronos.services.timer.timer_manager import TimerManager, get_timer_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/timer", tags=["timer"])

MAX_CUSTOM_MINUTES = 180


class UserRequest(CamelModel):
    user_id: str = Field(min_length=1)


class SwitchModeRequest(UserRequest):
    mode: TimerMode


class CustomTimerRequest(UserRequest):
    minutes: int = Field(ge=1, le=MAX_CUSTOM_MINUTES)
    label: Optional[str] = None


class TimerSettingsRequest(UserRequest):
    timers: Dict[TimerMode, int]


class ContextRequest(UserRequest):
    topic: str = ""
    tags: List[str] = Field(default_factory=list)


class ThemeRequest(UserRequest):
    theme: Optional[Theme] = None  # None toggles


class FeatureToggleRequest(UserRequest):
    flag: str = Field(min_length=1)


class AddResourceRequest(UserRequest):
    url: str = Field(min_length=1)
    title: Optional[str] = None
    type: ResourceType = ResourceType.DOCUMENTATION


class AddTaskRequest(UserRequest):
    text: str = Field(min_length=1)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    target_date: Optional[date] = None


class EditTaskRequest(UserRequest):
    """Only the fields that are sent are changed"""
    text: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    tags: Optional[List[str]] = None
    target_date: Optional[date] = None


class ToggleTaskRequest(UserRequest):
    task_id: str = Field(min_length=1)


@router.get("/state")
async def get_timer_state(
    user_id: str = Query(..., alias="userId", min_length=1),
    manager: TimerManager = Depends(get_timer_manager),
):
    """Current timer, config, context and planner summary of a user"""
    workspace = await manager.get_workspace(user_id)
    return workspace.to_dict()


@router.post("/toggle")
async def toggle_timer(
    request: UserRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """Start or pause the countdown"""
    workspace = await manager.get_workspace(request.user_id)
    workspace.engine.toggle()
    return workspace.to_dict()


@router.post("/switch")
async def switch_mode(
    request: SwitchModeRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Switch to a fixed mode.

    Switching to CUSTOM leaves the timer untouched and answers with
    `outcome: custom_prompt`; the client then calls /custom.
    """
    workspace = await manager.get_workspace(request.user_id)
    outcome: SwitchOutcome = workspace.engine.switch_mode(request.mode)
    return {"outcome": outcome.value, **workspace.to_dict()}


@router.post("/custom")
async def start_custom_timer(
    request: CustomTimerRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """Load a custom countdown of 1 to 180 minutes"""
    workspace = await manager.get_workspace(request.user_id)
    workspace.engine.start_custom(request.minutes, request.label)
    return workspace.to_dict()


@router.put("/settings")
async def update_timer_settings(
    request: TimerSettingsRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Replace timer durations.

    Raises:
        400: A duration is not positive
    """
    workspace = await manager.get_workspace(request.user_id)
    try:
        workspace.update_timers(request.timers)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return workspace.to_dict()


@router.put("/context")
async def update_context(
    request: ContextRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """Set the topic and tags recorded with completed sessions"""
    workspace = await manager.get_workspace(request.user_id)
    workspace.set_topic(request.topic)
    workspace.set_tags(request.tags)
    return workspace.to_dict()


@router.put("/theme")
async def update_theme(
    request: ThemeRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    workspace = await manager.get_workspace(request.user_id)
    if request.theme is None:
        workspace.toggle_theme()
    else:
        workspace.set_theme(request.theme)
    return workspace.to_dict()


@router.post("/features/toggle")
async def toggle_feature(
    request: FeatureToggleRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Flip a feature flag.

    Raises:
        404: Unknown flag
    """
    workspace = await manager.get_workspace(request.user_id)
    try:
        workspace.toggle_feature(request.flag)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return workspace.to_dict()


@router.post("/resources", status_code=201, response_model=ResourceEntry, response_model_by_alias=True)
async def add_resource(
    request: AddResourceRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """Attach a link to the session in progress"""
    workspace = await manager.get_workspace(request.user_id)
    try:
        return workspace.planner.add_resource(request.url, request.title, request.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/resources")
async def remove_resource(
    resource_id: str = Query(..., alias="id", min_length=1),
    user_id: str = Query(..., alias="userId", min_length=1),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Detach a link from the session in progress.

    Raises:
        404: No such resource
    """
    workspace = await manager.get_workspace(user_id)
    if not workspace.planner.remove_resource(resource_id):
        raise HTTPException(status_code=404, detail=f"Resource {resource_id} not found")
    return {"success": True}


@router.post("/tasks", status_code=201, response_model=TaskEntry, response_model_by_alias=True)
async def add_task(
    request: AddTaskRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """Append a TODO task to the backlog of the hosted timer"""
    workspace = await manager.get_workspace(request.user_id)
    try:
        return workspace.planner.add_task(
            request.text,
            description=request.description,
            priority=request.priority,
            tags=request.tags,
            target_date=request.target_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/tasks", response_model=TaskEntry, response_model_by_alias=True)
async def edit_task(
    request: EditTaskRequest,
    task_id: str = Query(..., alias="id", min_length=1),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Change fields of a backlog task.

    Raises:
        404: No such task
    """
    workspace = await manager.get_workspace(request.user_id)
    changes = request.model_dump(exclude_unset=True, exclude={"user_id"})
    try:
        current = workspace.planner.get_task(task_id)
        return workspace.planner.update_task(TaskEntry.model_validate({**current.model_dump(), **changes}))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/tasks/toggle", response_model=TaskEntry, response_model_by_alias=True)
async def toggle_task(
    request: ToggleTaskRequest,
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Flip a task between DONE and TODO.

    Raises:
        404: No such task
    """
    workspace = await manager.get_workspace(request.user_id)
    try:
        return workspace.planner.toggle_task(request.task_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/tasks")
async def remove_task(
    task_id: str = Query(..., alias="id", min_length=1),
    user_id: str = Query(..., alias="userId", min_length=1),
    manager: TimerManager = Depends(get_timer_manager),
):
    """
    Drop a task from the backlog.

    Raises:
        404: No such task
    """
    workspace = await manager.get_workspace(user_id)
    if not workspace.planner.remove_task(task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return {"success": True}
