"""Shared schema base and error envelope."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorBody(BaseModel):
    """Body returned for every 4xx/5xx produced by the API."""

    error: str
    details: list[str] = Field(default_factory=list)


class Health(BaseModel):
    status: str
    version: str
