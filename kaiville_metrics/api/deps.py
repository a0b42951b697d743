# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
API Dependencies — FastAPI dependency injection.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from kaiville_metrics.analytics.engine import MetricsEngine


async def get_metrics_engine(request: Request) -> MetricsEngine:
    """
    Return the MetricsEngine built by the app lifespan.

    The engine is created once per process and stored on app.state; routes
    never construct their own store connections.
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Metrics engine not initialized")
    return engine
