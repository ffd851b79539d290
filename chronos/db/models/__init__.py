"""SQLAlchemy ORM models"""

from chronos.db.models.user import User
from chronos.db.models.user_config import UserConfig
from chronos.db.models.session_log import SessionLog
from chronos.db.models.task import Task

__all__ = ["User", "UserConfig", "SessionLog", "Task"]
