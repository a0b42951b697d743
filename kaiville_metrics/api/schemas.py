# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
API Request/Response Schemas — Pydantic models for the metrics HTTP API.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Recording ─────────────────────────────────────────────────


class TrackRequest(BaseModel):
    """Request body for POST /api/metrics/track."""
    name: str = Field(..., min_length=1, max_length=64, description="Metric name")
    delta: int = Field(..., ge=0, description="Amount to add to today's bucket")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Merged into the bucket metadata")


class TrackResponse(BaseModel):
    success: bool


class BatchTrackRequest(BaseModel):
    """Request body for POST /api/metrics/track/batch."""
    items: List[TrackRequest] = Field(..., max_length=100)


class TrackResultModel(BaseModel):
    name: str
    delta: Any
    ok: bool
    error: Optional[str] = None


class BatchTrackResponse(BaseModel):
    success: bool
    total: int
    failed: int
    results: List[TrackResultModel]


# ── Queries ───────────────────────────────────────────────────


class MetricValueResponse(BaseModel):
    name: str
    date: date
    value: Optional[int] = Field(None, description="null when nothing was recorded")


class MetricPointModel(BaseModel):
    date: date
    value: int
    metadata: Dict[str, Any] = Field(default_factory=dict)


class MetricRangeResponse(BaseModel):
    name: str
    start: date
    end: date
    points: List[MetricPointModel]
    count: int


class DashboardTotalsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    articles: int
    pending_moderation: int = Field(..., alias="pendingModeration")
    users: int


class DashboardSummaryResponse(BaseModel):
    date: date
    today: Dict[str, int]
    totals: DashboardTotalsModel


class ApprovalRateResponse(BaseModel):
    start: date
    end: date
    rate: float = Field(..., ge=0, le=100, description="Percentage, not rounded")
