from fastapi import APIRouter
from chronos.api import ai, health, timer
from chronos.features.config.api import router as config_router
from chronos.features.sessions.api import router as sessions_router
from chronos.features.tasks.api import router as tasks_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(config_router)
api_router.include_router(sessions_router)
api_router.include_router(tasks_router)
api_router.include_router(timer.router)
api_router.include_router(ai.router)
api_router.include_router(health.router)
