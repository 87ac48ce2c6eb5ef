"""Error response handlers shared by all routes."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


def build_error_response(
    request: Request,
    status_code: int,
    message: str,
    field_errors: Optional[List[FieldError]] = None,
) -> JSONResponse:
    """Render an ErrorResponse body with the given status code."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=reason,
        message=message,
        path=request.url.path,
        field_errors=field_errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_error_handlers(app: FastAPI) -> None:
    """Answer HTTP and request validation errors with ErrorResponse bodies."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return build_error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        field_errors = [
            FieldError(field=_field_name(tuple(error.get("loc", ()))), message=error.get("msg", ""))
            for error in exc.errors()
        ]
        logger.debug("Request validation failed on %s: %s", request.url.path, field_errors)
        return build_error_response(request, 400, "Validation failed", field_errors)
