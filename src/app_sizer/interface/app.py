"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app_sizer.interface.dependencies import shutdown, startup
from app_sizer.interface.error_handlers import register_error_handlers
from app_sizer.interface.routes import router

_OPENAPI_TAGS = [
    {
        "name": "analysis",
        "description": (
            "Sanitize the raw entries of every feature, attribute the base "
            "feature's files to dependency components and report sizes and owners."
        ),
    },
    {
        "name": "comparison",
        "description": (
            "Sanitize a head and a base build and report per-file download "
            "size deltas plus added, removed and modified files."
        ),
    },
]


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the attribution pool and load default ownership rules."""
    await startup()
    try:
        yield
    finally:
        await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="App Sizer",
        version="1.0.0",
        description="Download and install size attribution for app bundles.",
        openapi_tags=_OPENAPI_TAGS,
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)
    return app
