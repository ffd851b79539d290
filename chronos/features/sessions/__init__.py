"""Session log feature module"""

from chronos.features.sessions.repository import SessionLogRepository
from chronos.features.sessions.service import SessionLogService

# Router lives in chronos.features.sessions.api (imports the timer manager)
__all__ = ["SessionLogRepository", "SessionLogService"]
