"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str


class TodoResponse(BaseModel):
    """Serialized todo item. ``status`` is the effective status."""

    id: int
    description: str
    status: str = Field(..., description="One of 'not done', 'done', 'past due'")
    creation_datetime: datetime
    due_datetime: datetime
    done_datetime: Optional[datetime] = Field(
        default=None, description="When the item was marked done (null if not done)"
    )


class TodoCreateRequest(BaseModel):
    """Request body for creating todo."""

    description: str = Field(..., min_length=1, max_length=2000)
    due_datetime: datetime = Field(
        ..., description="ISO 8601 timestamp; values without an offset are taken as UTC"
    )


class UpdateDescriptionRequest(BaseModel):
    """Request body for updating a todo description."""

    description: str = Field(..., min_length=1, max_length=2000)


class UpdateStatusRequest(BaseModel):
    """Request body for updating a todo status.

    Only 'done' and 'not done' are accepted; anything else, including
    'past due', is answered with 400.
    """

    status: str = Field(..., min_length=1, examples=["done", "not done"])


class SchedulerStatusResponse(BaseModel):
    """Response for the past due scheduler status endpoint."""

    enabled: bool
    running: bool
    interval_seconds: int
    run_count: int
    last_run_at: Optional[float] = None
    last_updated_count: Optional[int] = None
    last_error: Optional[str] = None


class FieldError(BaseModel):
    """Field-specific validation error."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard API error response."""

    timestamp: datetime
    status: int
    error: str = Field(..., description="HTTP status reason phrase")
    message: str
    path: str
    field_errors: Optional[List[FieldError]] = Field(
        default=None,
        serialization_alias="fieldErrors",
        description="Only present for request validation errors",
    )
