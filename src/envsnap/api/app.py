"""
FastAPI application factory for the envsnap collector service.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS, so page beacons from any origin can post host state.
2.  **Exception Handling**: Global handlers so every error returns structured JSON.
3.  **Routing**: Mounting the session router and the health probe.
4.  **Lifecycle**: Creating the session store on startup, closing sessions on shutdown.

Design Pattern
--------------
An **Application Factory** (`create_app`) lets tests build isolated app
instances.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from envsnap import __version__
from envsnap.api.routers import sessions
from envsnap.api.session_store import SessionStore
from envsnap.collector.aggregator import CollectionError
from envsnap.core.settings import get_logger, load_settings

logger = get_logger("envsnap.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    ASGI lifespan: initialize the session store, and unbind every session
    (cancelling pending scroll timers) on shutdown.
    """
    logger.info("envsnap API starting up")
    store = SessionStore.get_instance()

    yield

    store.clear()
    logger.info("envsnap API shut down")


def create_app() -> FastAPI:
    """
    Construct and configure the envsnap FastAPI application.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="envsnap API",
        description="Client environment snapshot collector",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(CollectionError)
    async def collection_error_handler(request: Request, exc: CollectionError) -> JSONResponse:
        """A field reader failed; the session keeps its previous snapshot."""
        logger.warning("collection failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Collection Failed",
                "detail": str(exc),
                "section": exc.section,
                "trigger": exc.trigger,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    app.include_router(sessions.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
