# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Metrics API — Recording, point/range queries, dashboard and approval rate.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from kaiville_metrics.analytics.engine import MetricsEngine
from kaiville_metrics.analytics.types import TrackItem
from kaiville_metrics.api.deps import get_metrics_engine
from kaiville_metrics.api.errors import InvalidRangeAPIError, MetricsUnavailableError
from kaiville_metrics.api.schemas import (
    ApprovalRateResponse,
    BatchTrackRequest,
    BatchTrackResponse,
    DashboardSummaryResponse,
    MetricRangeResponse,
    MetricValueResponse,
    TrackRequest,
    TrackResponse,
)

router = APIRouter(tags=["metrics"])


# ── Recording ─────────────────────────────────────────────────


@router.post("/metrics/track", response_model=TrackResponse)
async def track_metric(
    body: TrackRequest,
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Add `delta` to today's bucket. success=false means the event was dropped."""
    ok = await engine.track_metric(body.name, body.delta, body.metadata)
    return {"success": ok}


@router.post("/metrics/track/batch", response_model=BatchTrackResponse)
async def track_metrics(
    body: BatchTrackRequest,
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Record several increments concurrently, with a per-item outcome."""
    results = await engine.track_metrics_detailed(
        [TrackItem(i.name, i.delta, i.metadata) for i in body.items]
    )
    failed = sum(1 for r in results if not r.ok)
    return {
        "success": failed == 0,
        "total": len(results),
        "failed": failed,
        "results": [r.to_dict() for r in results],
    }


# ── Dashboards ────────────────────────────────────────────────


@router.get("/dashboard/summary", response_model=DashboardSummaryResponse, response_model_by_alias=True)
async def dashboard_summary(
    request: Request,
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Today's counters plus live article/moderation/user totals."""
    summary = await engine.get_dashboard_summary()
    if summary is None:
        raise MetricsUnavailableError(
            "Dashboard summary", trace_id=getattr(request.state, "trace_id", None)
        )
    return summary.to_dict()


@router.get("/moderation/approval-rate", response_model=ApprovalRateResponse)
async def approval_rate(
    request: Request,
    start: date = Query(..., description="First day (YYYY-MM-DD)"),
    end: date = Query(..., description="Last day, inclusive (YYYY-MM-DD)"),
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Percentage of moderated articles approved between start and end."""
    if start > end:
        raise InvalidRangeAPIError(start, end)
    rate = await engine.get_approval_rate(start, end)
    if rate is None:
        raise MetricsUnavailableError(
            "Approval rate", trace_id=getattr(request.state, "trace_id", None)
        )
    return {"start": start, "end": end, "rate": rate}


# ── Queries ───────────────────────────────────────────────────


@router.get("/metrics/{name}", response_model=MetricValueResponse)
async def get_metric(
    name: str,
    metric_date: Optional[date] = Query(None, alias="date", description="Defaults to today (UTC)"),
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Value of one bucket; value=null when nothing was recorded that day."""
    day = metric_date or engine.clock()
    value = await engine.get_metric(name, day)
    return {"name": name, "date": day, "value": value}


@router.get("/metrics/{name}/range", response_model=MetricRangeResponse)
async def get_metric_range(
    name: str,
    start: date = Query(...),
    end: date = Query(...),
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Stored buckets between start and end (inclusive), oldest first."""
    if start > end:
        raise InvalidRangeAPIError(start, end)
    points = await engine.get_metric_range(name, start, end)
    return {
        "name": name,
        "start": start,
        "end": end,
        "points": [p.to_dict() for p in points],
        "count": len(points),
    }
