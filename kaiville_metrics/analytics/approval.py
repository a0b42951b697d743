# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Approval Rate — Share of moderated articles that were approved.

Computed from live moderation timestamps in the content store, not from
the articles_approved / articles_rejected buckets.
"""

from __future__ import annotations

from typing import Any, Optional

from kaiville_metrics.analytics.validation import day_bounds, parse_range
from kaiville_metrics.resilience.best_effort import BestEffort, gather_all
from kaiville_metrics.storage.models import STATUS_APPROVED, STATUS_REJECTED
from kaiville_metrics.storage.repositories import ContentRepository


def approval_percentage(approved: int, rejected: int) -> float:
    """approved / (approved + rejected) * 100; 0.0 when nothing was moderated."""
    total = approved + rejected
    if total == 0:
        return 0.0
    return approved / total * 100


class ApprovalRateCalculator:
    def __init__(self, content: ContentRepository, guard: BestEffort) -> None:
        self._content = content
        self._guard = guard

    async def get_approval_rate(
        self, start: Any, end: Any, *, timeout: Optional[float] = None
    ) -> Optional[float]:
        """
        Approval percentage for articles moderated on the days start..end.

        Returns None when the range is invalid or the store is unavailable.
        The value is not rounded.
        """
        async def _compute() -> float:
            start_day, end_day = parse_range(start, end)
            since, until = day_bounds(start_day, end_day)
            approved, rejected = await gather_all(
                self._content.count_moderated(STATUS_APPROVED, since, until),
                self._content.count_moderated(STATUS_REJECTED, since, until),
            )
            return approval_percentage(approved, rejected)

        return await self._guard.run(
            "get_approval_rate", _compute, default=None, timeout=timeout,
            metric_date=f"{start}..{end}",
        )
