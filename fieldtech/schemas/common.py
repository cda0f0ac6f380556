from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: T | None = None
    message: str | None = None
