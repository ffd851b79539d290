"""SQLAlchemy ORM model for tasks table"""

from sqlalchemy import Column, BigInteger, String, Text, Date, DateTime, JSON
from sqlalchemy.sql import func

from chronos.db.base import Base


class Task(Base):
    """Planner backlog task"""
    __tablename__ = "tasks"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False)
    priority = Column(String, nullable=True)
    due_date = Column(Date, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    start_date = Column(BigInteger, nullable=False)  # epoch ms

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<Task(id='{self.id}', title='{self.title}', status='{self.status}')>"
