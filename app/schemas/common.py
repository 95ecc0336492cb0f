"""Shared schema base and the JSON response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base for API schemas: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope used by every endpoint: {success, data?, message?}."""

    success: bool = Field(default=True, description="False only for error responses")
    message: str | None = Field(default=None, description="Human-readable outcome")
    data: DataT | None = Field(default=None, description="Endpoint payload")


class ErrorResponse(BaseModel):
    """Error envelope produced by the exception handlers."""

    success: bool = False
    message: str
    errors: list[str] | None = None
