"""SQLAlchemy ORM model for user_config table"""

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from chronos.db.base import Base


class UserConfig(Base):
    """One row per user: timer durations, feature flags and theme"""
    __tablename__ = "user_config"

    user_id = Column(String, primary_key=True)
    timers = Column(JSON, nullable=False)
    feature_flags = Column(JSON, nullable=False)
    theme = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<UserConfig(user_id='{self.user_id}')>"
