"""
FastAPI application entry point for the submission portal.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from portal.config import get_settings
from portal.exceptions import PortalError, ValidationError
from portal.routes import MALFORMED_BODY_MESSAGES, error_field, router

logger = logging.getLogger(__name__)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %r", request.method, request.url.path, exc, exc_info=exc
        )
    key = error_field(request.scope.get("endpoint"))
    return JSONResponse(status_code=exc.status_code, content={key: exc.message})


async def malformed_body_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = MALFORMED_BODY_MESSAGES.get(request.scope.get("endpoint"))
    if message is None:
        return await request_validation_exception_handler(request, exc)
    logger.info("Rejected malformed body at %s: %s", request.url.path, exc.errors())
    return await portal_error_handler(request, ValidationError(message))


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(title="Submission Portal", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("Received %s request at %s", request.method, request.url.path)
        return await call_next(request)

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, malformed_body_handler)
    app.include_router(router, prefix=settings.api_prefix)
    if not settings.use_in_memory_backends and not settings.cos_bucket:
        # Blobs written by LocalStorageClient are served read-only from here.
        app.mount(
            settings.upload_url_prefix,
            StaticFiles(directory=settings.upload_dir, check_dir=False),
            name="uploads",
        )

        @app.on_event("startup")
        async def create_upload_dir() -> None:
            Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    return app


app = create_app()
