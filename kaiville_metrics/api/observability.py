# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Observability API — Health check and engine telemetry.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from kaiville_metrics import __version__
from kaiville_metrics.analytics.engine import MetricsEngine
from kaiville_metrics.api.deps import get_metrics_engine

router = APIRouter(tags=["observability"])


@router.get("/health")
async def health_check(
    request: Request,
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Health check with store status and engine telemetry."""
    db = getattr(request.app.state, "db", None)
    store_ok = await db.ping() if db is not None else False
    engine.telemetry.set_gauge("store_up", 1.0 if store_ok else 0.0)
    return {
        "status": "ok" if store_ok else "degraded",
        "service": "kaiville-metrics",
        "version": __version__,
        "store": "connected" if store_ok else "unavailable",
        "telemetry": engine.telemetry.snapshot(),
    }


@router.get("/api/engine/telemetry")
async def get_telemetry(engine: MetricsEngine = Depends(get_metrics_engine)):
    """Return the engine's own counters (writes dropped, store latency, ...)."""
    return engine.telemetry.snapshot()
