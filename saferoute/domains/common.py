"""
Common API response envelope

Response structure: {success, data, error, timestamp}
"""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform response envelope

    success: whether the request was served
    data: payload
    error: human-readable message when success is False
    timestamp: ISO8601 UTC timestamp
    """
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: datetime.utcnow().isoformat() + "Z")

    @classmethod
    def ok(cls, data: T = None) -> "ApiResponse[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> "ApiResponse":
        return cls(success=False, error=error, data=data)
