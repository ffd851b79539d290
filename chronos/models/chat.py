"""AI chat message model"""
from enum import Enum

from .base import CamelModel


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ChatMessage(CamelModel):
    id: str
    role: ChatRole
    text: str
    timestamp: int  # epoch ms
