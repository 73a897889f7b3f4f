"""Web entry point — FastAPI app factory and lifespan wiring."""

from __future__ import annotations

import logging
import random
import secrets
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from azure.monitor.opentelemetry import configure_azure_monitor
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from wantok.agents.llm import create_chat_client
from wantok.config import Settings, load_settings
from wantok.database.client import CosmosClient
from wantok.exceptions import (
    ConcurrencyConflict,
    InvalidInput,
    InvalidTransition,
    LockContention,
    StaleReference,
    WantokError,
)
from wantok.health import check_emulators
from wantok.logging import configure_logging
from wantok.routes import admin, reviews, tasks, translations
from wantok.routes import status as status_routes

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

_ERROR_STATUS: list[tuple[type[WantokError], int]] = [
    (StaleReference, status.HTTP_404_NOT_FOUND),
    (InvalidInput, 422),
    (LockContention, status.HTTP_409_CONFLICT),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (ConcurrencyConflict, status.HTTP_409_CONFLICT),
]


async def init_database(settings: Settings) -> CosmosClient:
    """Connect to Cosmos DB, creating containers when running locally."""
    cosmos = CosmosClient(settings.cosmos)
    try:
        await cosmos.initialize(create_containers=settings.app.is_development)
    except Exception as exc:
        msg = f"Cannot connect to Cosmos DB at {settings.cosmos.endpoint}"
        raise ConnectionError(msg) from exc
    logger.info("Cosmos DB connected — database=%s", settings.cosmos.database)
    return cosmos


def init_chat_client(settings: Settings) -> object | None:
    if not settings.openai.is_configured:
        logger.warning("AZURE_OPENAI_ENDPOINT is not set — AI assistance disabled")
        return None
    return create_chat_client(settings.openai, use_key=settings.openai.api_key or None)


def error_response(exc: WantokError) -> JSONResponse:
    """Map a core error to its HTTP status and a user-facing message."""
    code = status.HTTP_400_BAD_REQUEST
    for error_type, error_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            code = error_code
            break
    detail = str(exc)
    if isinstance(exc, ConcurrencyConflict):
        detail = "Action failed, please retry"
    return JSONResponse(
        status_code=code,
        content={"error": type(exc).__name__, "detail": detail},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    if settings.app.is_development and not await check_emulators(settings):
        msg = "Local dependencies are not reachable"
        raise RuntimeError(msg)

    cosmos = await init_database(settings)
    app.state.cosmos = cosmos
    app.state.chat_client = init_chat_client(settings)
    app.state.rng = random.Random()  # noqa: S311
    logger.info("Web app started — env=%s", settings.app.env)
    try:
        yield
    finally:
        await cosmos.close()
        logger.info("Web app stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = load_settings()
    configure_logging(settings.app.log_level)

    if settings.monitor.connection_string:
        configure_azure_monitor(connection_string=settings.monitor.connection_string)
        logger.info("Azure Monitor OpenTelemetry configured")

    app = FastAPI(title="Wantok", lifespan=lifespan)
    app.state.settings = settings

    secret_key = settings.app.secret_key
    if not secret_key:
        if not settings.app.is_development:
            msg = "APP_SECRET_KEY must be set outside development"
            raise RuntimeError(msg)
        secret_key = secrets.token_urlsafe(32)
        logger.warning("APP_SECRET_KEY is not set — using an ephemeral session key")
    app.add_middleware(SessionMiddleware, secret_key=secret_key)

    @app.exception_handler(WantokError)
    async def _handle_core_error(request: Request, exc: WantokError) -> JSONResponse:
        logger.info(
            "Request failed — %s %s: %s", request.method, request.url.path, exc
        )
        return error_response(exc)

    app.include_router(tasks.router)
    app.include_router(translations.router)
    app.include_router(reviews.router)
    app.include_router(admin.router)
    app.include_router(status_routes.router)
    return app


def main() -> None:
    """Entry point for the web process."""
    uvicorn.run("wantok.app:create_app", factory=True, host="0.0.0.0", port=8000)  # noqa: S104


if __name__ == "__main__":
    main()
