"""PkgSentinel HTTP API — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pkgsentinel import __version__
from pkgsentinel.api.deps import get_settings
from pkgsentinel.api.errors import register_error_handlers
from pkgsentinel.api.routers import projects, scan
from pkgsentinel.core.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()
    settings = get_settings()

    app = FastAPI(
        title="PkgSentinel",
        version=__version__,
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
    )

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(scan.router, prefix="/api/v1/scan", tags=["scan"])
    app.include_router(projects.router, prefix="/api/v1/projects", tags=["projects"])

    return app
