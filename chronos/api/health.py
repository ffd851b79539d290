"""Health check and monitoring endpoints"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text

from chronos.db.session import IS_SQLITE, SessionLocal, get_pool_stats
from chronos.services.timer.timer_manager import TimerManager, get_timer_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

WARNING_UTILIZATION = 80
CRITICAL_UTILIZATION = 90


async def database_reachable() -> bool:
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


@router.get("/pool")
async def get_pool_health():
    """
    Connection pool usage.

    SQLite runs without a pool, so it always reports zero capacity and "healthy".
    """
    stats = get_pool_stats()
    capacity = stats["size"] + stats["max_overflow"]
    in_use = stats["checked_out"]
    utilization = round(in_use / capacity * 100, 2) if capacity else 0

    status = "healthy"
    if utilization >= CRITICAL_UTILIZATION:
        status = "critical"
    elif utilization >= WARNING_UTILIZATION:
        status = "warning"

    return {
        "status": status,
        "driver": "sqlite" if IS_SQLITE else "postgresql",
        "pool_size": stats["size"],
        "max_overflow": stats["max_overflow"],
        "available": stats["checked_in"],
        "in_use": in_use,
        "overflow": stats["overflow"],
        "utilization_percent": utilization,
        "total_capacity": capacity,
    }


@router.get("/")
async def health_check(manager: TimerManager = Depends(get_timer_manager)):
    """Service status with database reachability and hosted timer count"""
    database_ok = await database_reachable()
    return {
        "status": "healthy" if database_ok else "degraded",
        "service": "chronos-backend",
        "database": "ok" if database_ok else "unavailable",
        "active_timers": len(manager.user_ids),
        "ai_configured": manager.insight_service.configured,
    }
