"""
FastAPI application entrypoint for the owner portal gateway.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from http import HTTPStatus
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from owner_portal.api.routes import router as api_router
from owner_portal.core.config import AppSettings, get_settings
from owner_portal.core.errors import PortalError
from owner_portal.core.logging import configure_logging

logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()

_PLACEHOLDER_PAGE = """<!DOCTYPE html>
<html>
  <head><title>Owner Portal</title></head>
  <body>
    <h1>Owner Portal API</h1>
    <p>The API is running. The front-end build was not found.</p>
    <p>Health check: <a href="/health">/health</a></p>
  </body>
</html>
"""


def _register_exception_handlers(app: FastAPI, settings: AppSettings) -> None:
    include_details = not settings.is_production

    @app.exception_handler(PortalError)
    async def _portal_error(request: Request, exc: PortalError) -> JSONResponse:
        if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_envelope(include_details=include_details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"message": exc.detail, "status": exc.status_code}},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = {"message": "Invalid request", "code": "VALIDATION_ERROR"}
        if include_details:
            error["details"] = exc.errors()
        return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content={"error": error})

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = {"message": "An unexpected server error occurred"}
        if include_details:
            error["details"] = str(exc)
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR, content={"error": error}
        )


def _frontend_response(build_dir: Path, full_path: str) -> Response:
    """Serve a built asset, else the SPA entry page, else a placeholder."""
    root = build_dir.resolve()
    candidate = (root / full_path).resolve()
    if full_path and candidate.is_relative_to(root) and candidate.is_file():
        return FileResponse(candidate)

    index = root / "index.html"
    if index.is_file():
        return FileResponse(index)
    return HTMLResponse(_PLACEHOLDER_PAGE)


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Owner Portal Gateway",
        version="0.1.0",
        description="Owner portal API backed by Hostaway, with sample-data fallback.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    _register_exception_handlers(app, settings)

    @app.get("/health", status_code=HTTPStatus.OK)
    async def healthcheck() -> dict:
        """Simple health endpoint for monitoring."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.monotonic() - _STARTED_AT,
            "environment": settings.environment,
        }

    app.include_router(api_router, prefix="/api")

    @app.api_route(
        "/api/{unmatched:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def unknown_api_route(request: Request) -> None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"API endpoint not found: {request.url.path}",
        )

    build_dir = Path(settings.frontend_build_dir)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str) -> Response:
        if full_path == "api":
            raise HTTPException(
                status_code=HTTPStatus.NOT_FOUND,
                detail="API endpoint not found: /api",
            )
        return _frontend_response(build_dir, full_path)

    return app


app = create_app()

__all__ = ["app", "create_app"]
