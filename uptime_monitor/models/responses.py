"""Generic API response envelope model.

All status API responses are wrapped in this envelope for consistency:
{ success: bool, data: T | None, error: str | None, meta: dict | None }
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """JSON envelope for all API responses."""

    success: bool
    data: T | None = None
    error: str | None = None
    meta: dict | None = None


class DomainAvailabilityView(BaseModel):
    """Availability of one domain as exposed by the status API."""

    domain: str
    percentage: int
    success_count: int
    total_count: int
