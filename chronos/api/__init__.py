# API module exports
from chronos.api import ai, health, timer
from chronos.api.base import api_router

__all__ = ["ai", "health", "timer", "api_router"]
