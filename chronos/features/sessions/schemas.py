"""Request schemas for the sessions API"""

from pydantic import Field

from chronos.models.base import CamelModel
from chronos.models.session import SessionRecord


class CreateSessionRequest(CamelModel):
    """Body of POST /api/sessions"""
    user_id: str = Field(min_length=1)
    session: SessionRecord
