# src/chetana/main.py
"""Main entry point for the Chetana application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chetana.api.v1 import (
    admin_router,
    chat_router,
    data_router,
    forum_router,
    session_router,
    streaks_router,
    users_router,
)
from chetana.core.settings import settings
from chetana.db.session import create_tables
from chetana.services.chat_history import get_history_store
from chetana.services.errors import ChetanaError
from chetana.services.gemini import get_gemini_client

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Chetana API",
    description="Mental wellness companion: tracker, assistant and peer support forum",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(forum_router, prefix="/api/v1")
app.include_router(streaks_router, prefix="/api/v1")
app.include_router(chat_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(session_router, prefix="/api/v1")
app.include_router(data_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


def _error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


def _describe_validation_errors(errors: list[Any]) -> str:
    if any(error.get("type") == "missing" for error in errors):
        return "Missing required fields"
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = first.get("msg", "Invalid request")
    return f"Invalid {location}: {message}" if location else message


@app.exception_handler(ChetanaError)
async def chetana_error_handler(request: Request, exc: ChetanaError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        _describe_validation_errors(list(exc.errors())),
    )


@app.exception_handler(ValidationError)
async def body_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        _describe_validation_errors(list(exc.errors())),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database connection failed",
    )


@app.on_event("startup")
async def on_startup() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if settings.auto_create_tables:
        create_tables()
    if not settings.chat_enabled:
        logger.warning("GEMINI_API_KEY is not set; the chat assistant is disabled")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_gemini_client().close()


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint to verify the service is running."""
    return {
        "status": "ok",
        "chat": settings.chat_enabled,
        "chat_history": get_history_store().status(),
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Mental wellness companion API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("chetana.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
