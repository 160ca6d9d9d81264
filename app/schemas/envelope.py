"""Uniform response envelope: {data, errors: [{field, message}], status}."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class FieldError(BaseModel):
    """One error entry; field names the offending input or a general category."""

    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every API response. On failure data is omitted and errors is non-empty."""

    data: T | None = None
    errors: list[FieldError] = Field(default_factory=list)
    status: Literal["success", "fail"] = "success"


def ok(data: Any) -> ApiResponse:
    return ApiResponse(data=data)


def fail_content(errors: list[FieldError]) -> dict[str, Any]:
    """JSON body for a failure response (no data key)."""
    return {
        "errors": [e.model_dump() for e in errors],
        "status": "fail",
    }
