"""SQLAlchemy ORM model for session_logs table"""

from sqlalchemy import Column, Integer, BigInteger, String, DateTime, JSON
from sqlalchemy.sql import func

from chronos.db.base import Base


class SessionLog(Base):
    """
    Completed timer session. Rows are only ever inserted.
    Resource and task snapshots are stored as JSON documents.
    """
    __tablename__ = "session_logs"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)

    timestamp = Column(BigInteger, nullable=False, index=True)  # epoch ms
    duration_seconds = Column(Integer, nullable=False)
    mode = Column(String, nullable=False)
    session_label = Column(String, nullable=True)
    topic = Column(String, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    resources = Column(JSON, nullable=False, default=list)
    tasks = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<SessionLog(id='{self.id}', mode='{self.mode}', duration={self.duration_seconds})>"
