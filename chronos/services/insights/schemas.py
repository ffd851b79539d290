"""Structured output schemas for the insight service"""
from typing import List

from pydantic import BaseModel, Field


class TopicSuggestions(BaseModel):
    topics: List[str] = Field(description="Advanced sub-topics or related skills, one short phrase each")
