from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import StoreError, TodoServiceError
from .logging_config import configure_logging
from .repositories import close_repository, get_repository, init_repository
from .routers import todos as todos_router
from .settings import get_settings

logger = structlog.get_logger()

ROUTE_NOT_FOUND = "Route not found"

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "CRUD operations for Todo items with filtering and a daily agenda.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Acquire the process-wide repository on startup; release it on shutdown."""
    settings = get_settings()
    logger.info("api_starting", backend=settings.persistence_backend)
    await init_repository(settings)
    try:
        yield
    finally:
        logger.info("api_stopping")
        await close_repository()


async def service_error_handler(request: Request, exc: TodoServiceError) -> PlainTextResponse:
    """Render a service error as its status code and plain-text message."""
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Anything not mapped elsewhere is a generic server error."""
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return PlainTextResponse(StoreError.default_message, status_code=500)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """
    Unmatched paths (and unsupported methods on known paths) are 404
    'Route not found'. Other HTTP errors keep their status and detail.
    """
    if exc.status_code in (404, 405):
        return PlainTextResponse(ROUTE_NOT_FOUND, status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors
    (e.g. a body that is not a JSON object).

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


# PUBLIC_INTERFACE
def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Todo Service",
        description="CRUD API for todo records stored in a document database.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TodoServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the active backend.
        """
        return {"message": "Healthy", "backend": get_repository().name}

    app.include_router(todos_router.router)
    return app


# PUBLIC_INTERFACE
def serve() -> None:
    """Run the API under uvicorn on the configured host and port."""
    settings = get_settings()
    logger.info("server_listening", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


app = create_app()


if __name__ == "__main__":
    serve()
