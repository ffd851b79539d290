"""Request schemas for the config API"""

from pydantic import Field

from chronos.models.app_config import AppConfig
from chronos.models.base import CamelModel


class UpdateConfigRequest(CamelModel):
    """Body of PUT /api/config"""
    user_id: str = Field(min_length=1)
    config: AppConfig
