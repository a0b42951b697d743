# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Kaiville Metrics Application Entry Point.

FastAPI app with lifespan, middleware and the metrics API routers.
The store client and the engine are built once here and shared through
app.state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kaiville_metrics import __version__
from kaiville_metrics.analytics.engine import MetricsEngine
from kaiville_metrics.api.errors import APIError, api_error_handler
from kaiville_metrics.api.metrics import router as metrics_router
from kaiville_metrics.api.middleware import TraceMiddleware
from kaiville_metrics.api.observability import router as observability_router
from kaiville_metrics.core.config import get_settings
from kaiville_metrics.core.logging import setup_logging
from kaiville_metrics.storage.database import Database

logger = logging.getLogger("kaiville.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store, build the engine, and dispose both on shutdown."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    db = Database.from_settings(settings)
    await db.init(create_tables=settings.DB_CREATE_TABLES)
    app.state.db = db
    app.state.engine = MetricsEngine.from_database(db, settings)
    logger.info(
        "[Metrics] Ready (env=%s, name policy=%s)",
        settings.ENV, settings.METRIC_NAME_POLICY,
    )
    yield
    await db.close()
    logger.info("[Metrics] Shutdown complete")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI app; tests pass use_lifespan=False and set app.state themselves."""
    app = FastAPI(
        title="Kaiville Metrics",
        description="Research center usage metrics",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    # ── Middleware ───────────────────────────────────────────
    app.add_middleware(TraceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ──────────────────────────────────────
    app.add_exception_handler(APIError, api_error_handler)

    # ── Routes ──────────────────────────────────────────────
    app.include_router(metrics_router, prefix="/api")
    app.include_router(observability_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("kaiville_metrics.main:app", host=settings.HOST, port=settings.PORT)
