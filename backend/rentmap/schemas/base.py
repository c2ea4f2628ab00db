"""Shared schema base — camelCase wire names, snake_case attributes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both camelCase (wire) and snake_case (internal) field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
