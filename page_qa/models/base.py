"""Shared pydantic configuration for input and summary models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Model(BaseModel):
    """Immutable model populated from snake_case field names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CamelModel(Model):
    """Model serialized with camelCase keys for downstream consumers."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )
