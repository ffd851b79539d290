"""Shared pydantic base for wire models"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialised with camelCase keys, accepting snake_case on input too"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
