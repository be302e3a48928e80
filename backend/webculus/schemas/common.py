"""Shared / generic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads the frontend sends and reads in camelCase.

    Python code uses snake_case attributes; JSON uses camelCase keys.
    Either spelling is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(BaseModel):
    """Generic success wrapper."""

    success: bool = True
    message: str = "ok"
    data: dict[str, Any] | None = None
