# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Dashboard Aggregator — Today's counters combined with live content totals.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from kaiville_metrics.analytics.types import DashboardSummary, DashboardTotals, utc_today
from kaiville_metrics.resilience.best_effort import BestEffort, gather_all
from kaiville_metrics.storage.models import STATUS_APPROVED, STATUS_PENDING
from kaiville_metrics.storage.repositories import ContentRepository, MetricRepository

logger = logging.getLogger("kaiville.dashboard")


class DashboardAggregator:
    def __init__(
        self,
        metrics: MetricRepository,
        content: ContentRepository,
        guard: BestEffort,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._metrics = metrics
        self._content = content
        self._guard = guard
        self._clock = clock

    async def get_summary(
        self, *, timeout: Optional[float] = None
    ) -> Optional[DashboardSummary]:
        """
        Build the admin dashboard summary.

        Returns None ("metrics unavailable") if any of the four reads fails;
        a partial summary would show misleading zeros.
        """
        return await self._guard.run(
            "get_dashboard_summary", self._collect, default=None, timeout=timeout,
        )

    async def _collect(self) -> DashboardSummary:
        today = self._clock()
        # Independent reads on separate sessions; no shared snapshot
        today_values, articles, pending, users = await gather_all(
            self._metrics.values_for_date(today),
            self._content.count_articles(STATUS_APPROVED),
            self._content.count_articles(STATUS_PENDING),
            self._content.count_users(),
        )
        logger.debug(
            "Dashboard summary: %d buckets today, %d articles, %d pending, %d users",
            len(today_values), articles, pending, users,
        )
        return DashboardSummary(
            date=today,
            today=today_values,
            totals=DashboardTotals(
                articles=articles,
                pending_moderation=pending,
                users=users,
            ),
        )
