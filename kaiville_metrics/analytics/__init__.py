# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Analytics — Recording and querying research center usage metrics.
"""

from kaiville_metrics.analytics.engine import MetricsEngine
from kaiville_metrics.analytics.types import (
    DashboardSummary,
    DashboardTotals,
    MetricPoint,
    TrackItem,
    TrackResult,
)

__all__ = [
    "MetricsEngine",
    "DashboardSummary",
    "DashboardTotals",
    "MetricPoint",
    "TrackItem",
    "TrackResult",
]
