"""Response envelopes shared by every router."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data?, message?}`` envelope."""

    success: bool = True
    data: T | None = None
    message: str | None = None


class ListResponse(BaseModel, Generic[T]):
    """Envelope for lists; ``total`` counts matches before pagination."""

    success: bool = True
    data: list[T]
    total: int


class ValidationResult(BaseModel):
    """Answer of the room/bed number availability checks."""

    valid: bool
    is_duplicate: bool
    message: str
