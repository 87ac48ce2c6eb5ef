"""Todo endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from fastapi import FastAPI, HTTPException, Query

from src.todo import (
    InvalidTransitionError,
    TodoConflictError,
    TodoImmutableError,
    TodoNotFoundError,
    TodoValidationError,
)

from ..dependencies import get_todo_service, serialize_todo
from ..schemas import (
    TodoCreateRequest,
    TodoResponse,
    UpdateDescriptionRequest,
    UpdateStatusRequest,
)

logger = logging.getLogger(__name__)


def _to_http_error(exc: Exception, failure: str) -> HTTPException:
    """Map todo domain errors to client errors; anything else is logged and a 500."""
    if isinstance(exc, TodoNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (TodoImmutableError, TodoConflictError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (InvalidTransitionError, TodoValidationError)):
        return HTTPException(status_code=400, detail=str(exc))
    logger.exception("%s: %s", failure, exc)
    return HTTPException(status_code=500, detail=failure)


def register_todo_routes(app: FastAPI) -> None:
    """Register todo endpoints."""

    @app.get("/api/todos", response_model=List[TodoResponse])
    async def list_todos(
        include_all: bool = Query(default=False, alias="all"),
    ) -> List[TodoResponse]:
        """List 'not done' todos, or every todo with ?all=true."""
        service = get_todo_service()
        try:
            todos = await asyncio.to_thread(service.list, include_all)
            return [serialize_todo(todo) for todo in todos]
        except Exception as exc:
            raise _to_http_error(exc, "Failed to list todos") from exc

    @app.post("/api/todos", response_model=TodoResponse, status_code=201)
    async def create_todo(request: TodoCreateRequest) -> TodoResponse:
        """Create a new todo."""
        service = get_todo_service()
        try:
            todo = await asyncio.to_thread(
                service.create, request.description, request.due_datetime
            )
            return serialize_todo(todo)
        except Exception as exc:
            raise _to_http_error(exc, "Failed to create todo") from exc

    @app.get("/api/todos/{todo_id}", response_model=TodoResponse)
    async def get_todo(todo_id: int) -> TodoResponse:
        """Get a single todo."""
        service = get_todo_service()
        try:
            todo = await asyncio.to_thread(service.get_by_id, todo_id)
            return serialize_todo(todo)
        except Exception as exc:
            raise _to_http_error(exc, "Failed to get todo") from exc

    @app.patch("/api/todos/{todo_id}/description", response_model=TodoResponse)
    async def update_description(
        todo_id: int, request: UpdateDescriptionRequest
    ) -> TodoResponse:
        """Update the description. Past due items answer 409."""
        service = get_todo_service()
        try:
            todo = await asyncio.to_thread(
                service.update_description, todo_id, request.description
            )
            return serialize_todo(todo)
        except Exception as exc:
            raise _to_http_error(exc, "Failed to update todo") from exc

    @app.patch("/api/todos/{todo_id}/status", response_model=TodoResponse)
    async def update_status(todo_id: int, request: UpdateStatusRequest) -> TodoResponse:
        """Set status to 'done' or 'not done'."""
        service = get_todo_service()
        try:
            todo = await asyncio.to_thread(service.update_status, todo_id, request.status)
            return serialize_todo(todo)
        except Exception as exc:
            raise _to_http_error(exc, "Failed to update todo status") from exc

    @app.patch("/api/todos/{todo_id}/done", response_model=TodoResponse)
    async def mark_done(todo_id: int) -> TodoResponse:
        """Mark a todo as done."""
        service = get_todo_service()
        try:
            todo = await asyncio.to_thread(service.mark_done, todo_id)
            return serialize_todo(todo)
        except Exception as exc:
            raise _to_http_error(exc, "Failed to mark todo as done") from exc

    @app.patch("/api/todos/{todo_id}/not-done", response_model=TodoResponse)
    async def mark_not_done(todo_id: int) -> TodoResponse:
        """Mark a todo as not done."""
        service = get_todo_service()
        try:
            todo = await asyncio.to_thread(service.mark_not_done, todo_id)
            return serialize_todo(todo)
        except Exception as exc:
            raise _to_http_error(exc, "Failed to mark todo as not done") from exc
