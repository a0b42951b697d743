# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Metrics Engine — Single entry point for recording and querying metrics.

Build one per process from an explicit Database and share it:

    db = Database(settings.DATABASE_URL)
    engine = MetricsEngine.from_database(db, settings)

    await engine.track_metric("article_views", 1)
    views = await engine.get_metric("article_views")

Every method is safe to call inline: failures are logged and reported as
False / None / [] instead of raising.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional

from kaiville_metrics.analytics.approval import ApprovalRateCalculator
from kaiville_metrics.analytics.dashboard import DashboardAggregator
from kaiville_metrics.analytics.reader import Reader
from kaiville_metrics.analytics.recorder import BatchRecorder, Recorder
from kaiville_metrics.analytics.types import (
    DashboardSummary,
    MetricPoint,
    TrackResult,
    utc_today,
)
from kaiville_metrics.core.config import MetricsSettings
from kaiville_metrics.core.telemetry import EngineTelemetry
from kaiville_metrics.core.vocabulary import MetricVocabulary
from kaiville_metrics.resilience.best_effort import BestEffort
from kaiville_metrics.storage.database import Database
from kaiville_metrics.storage.repositories import ContentRepository, MetricRepository


class MetricsEngine:
    """Facade over Recorder, BatchRecorder, Reader, DashboardAggregator and ApprovalRateCalculator."""

    def __init__(
        self,
        metrics: MetricRepository,
        content: ContentRepository,
        vocabulary: Optional[MetricVocabulary] = None,
        telemetry: Optional[EngineTelemetry] = None,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self.clock = clock
        self.vocabulary = vocabulary or MetricVocabulary()
        self.telemetry = telemetry or EngineTelemetry()
        guard = BestEffort(self.telemetry)

        self.recorder = Recorder(metrics, self.vocabulary, guard, clock)
        self.batch = BatchRecorder(self.recorder, guard)
        self.reader = Reader(metrics, guard, clock)
        self.dashboard = DashboardAggregator(metrics, content, guard, clock)
        self.approvals = ApprovalRateCalculator(content, guard)

    @classmethod
    def from_database(
        cls,
        database: Database,
        settings: Optional[MetricsSettings] = None,
        content_database: Optional[Database] = None,
        **kwargs: Any,
    ) -> "MetricsEngine":
        """
        Wire repositories onto an existing Database.

        `content_database` is only needed when the research center tables
        live in a different database from research_analytics.
        """
        if settings is not None and "vocabulary" not in kwargs:
            kwargs["vocabulary"] = MetricVocabulary(
                extra_names=settings.extra_metric_names_list,
                policy=settings.METRIC_NAME_POLICY,
                quarantine_name=settings.QUARANTINE_METRIC_NAME,
            )
        content_db = content_database or database
        return cls(
            MetricRepository(database.session_factory),
            ContentRepository(content_db.session_factory),
            **kwargs,
        )

    # ── Recording ───────────────────────────────────────────────

    async def track_metric(
        self,
        name: Any,
        delta: int,
        metadata: Optional[Dict[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> bool:
        return await self.recorder.track_metric(name, delta, metadata, timeout=timeout)

    async def track_metrics(
        self, items: Iterable[Any], *, timeout: Optional[float] = None
    ) -> bool:
        return await self.batch.track_metrics(items, timeout=timeout)

    async def track_metrics_detailed(
        self, items: Iterable[Any], *, timeout: Optional[float] = None
    ) -> List[TrackResult]:
        return await self.batch.track_metrics_detailed(items, timeout=timeout)

    # ── Queries ─────────────────────────────────────────────────

    async def get_metric(
        self, name: Any, metric_date: Any = None, *, timeout: Optional[float] = None
    ) -> Optional[int]:
        return await self.reader.get_metric(name, metric_date, timeout=timeout)

    async def get_metric_range(
        self, name: Any, start: Any, end: Any, *, timeout: Optional[float] = None
    ) -> List[MetricPoint]:
        return await self.reader.get_metric_range(name, start, end, timeout=timeout)

    async def get_dashboard_summary(
        self, *, timeout: Optional[float] = None
    ) -> Optional[DashboardSummary]:
        return await self.dashboard.get_summary(timeout=timeout)

    async def get_approval_rate(
        self, start: Any, end: Any, *, timeout: Optional[float] = None
    ) -> Optional[float]:
        return await self.approvals.get_approval_rate(start, end, timeout=timeout)
