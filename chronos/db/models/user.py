"""SQLAlchemy ORM model for users table"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from chronos.db.base import Base


class User(Base):
    """Owner of configs, session logs and tasks"""
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id='{self.id}')>"
