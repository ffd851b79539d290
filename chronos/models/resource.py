"""Session resource (bookmark) model"""
from enum import Enum

from .base import CamelModel


class ResourceType(str, Enum):
    VIDEO = "VIDEO"
    BLOG = "BLOG"
    DOCUMENTATION = "DOCUMENTATION"
    ARTICLE = "ARTICLE"
    OTHER = "OTHER"


class ResourceEntry(CamelModel):
    """A link attached to the session in progress"""
    id: str
    url: str
    title: str
    type: ResourceType = ResourceType.OTHER
