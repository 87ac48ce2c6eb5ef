"""FastAPI application bootstrap."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .dependencies import config, get_scheduler, get_todo_repository, get_todo_service
from .errors import register_error_handlers
from .routes import register_health_routes, register_todo_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the past due sweep for as long as the application is up."""
    scheduler = None
    if config.sweep.enabled:
        scheduler = get_scheduler()
        scheduler.start()
    else:
        logger.info("Past due sweep disabled by configuration")
    try:
        yield
    finally:
        if scheduler is not None and scheduler.is_running():
            scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Todo Service API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_todo_routes(app)
    register_health_routes(app)

    return app


app = create_app()

__all__ = ["app", "create_app", "get_scheduler", "get_todo_repository", "get_todo_service"]
