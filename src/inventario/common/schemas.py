"""Response envelopes shared by every endpoint.

Successful responses are wrapped as ``{"success": true, "data": ..., "count": n}``
(``count`` only for listings) and failures as ``{"success": false, "error": "..."}``.
"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T
    count: Optional[int] = Field(None, description="Number of records, for listings")
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str = Field(..., description="Human-readable description of the failure")
    detalle: Optional[str] = None


class DeletedResponse(BaseModel):
    id: int


def envelope(data, message: Optional[str] = None) -> ApiResponse:
    """Wrap ``data`` in a success envelope, adding ``count`` for lists."""
    count = len(data) if isinstance(data, list) else None
    return ApiResponse(data=data, count=count, message=message)
