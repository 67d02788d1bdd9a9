"""
FastAPI application entry point for the newsdesk service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from newsdesk.config import configure_logging, get_settings
from newsdesk.errors import NewsdeskError
from newsdesk.routes import router

logger = logging.getLogger(__name__)


async def handle_newsdesk_error(request: Request, exc: NewsdeskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error": type(exc).__name__,
            "retryable": exc.retryable,
        },
        headers=headers,
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(title=f"{settings.site_name} API", version="0.1.0")
    app.add_exception_handler(NewsdeskError, handle_newsdesk_error)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
