# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Reader — Point and range queries over metric buckets.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, List, Optional

from kaiville_metrics.analytics.types import MetricPoint, utc_today
from kaiville_metrics.analytics.validation import check_name, parse_date, parse_range
from kaiville_metrics.resilience.best_effort import BestEffort
from kaiville_metrics.storage.repositories import MetricRepository

logger = logging.getLogger("kaiville.reader")


class Reader:
    def __init__(
        self,
        repo: MetricRepository,
        guard: BestEffort,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._repo = repo
        self._guard = guard
        self._clock = clock

    async def get_metric(
        self,
        name: Any,
        metric_date: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[int]:
        """
        Value of one bucket (defaults to today).

        None means no event was ever recorded for the bucket; a bucket that
        was incremented by zero returns 0. Failures also return None.
        """
        async def _read() -> Optional[int]:
            metric_name = check_name(name)
            day = self._clock() if metric_date is None else parse_date(metric_date)
            return await self._repo.get_value(metric_name, day)

        return await self._guard.run(
            "get_metric", _read, default=None, timeout=timeout,
            metric_name=name, metric_date=metric_date,
        )

    async def get_metric_range(
        self,
        name: Any,
        start: Any,
        end: Any,
        *,
        timeout: Optional[float] = None,
    ) -> List[MetricPoint]:
        """
        Stored buckets with start <= date <= end, ascending.

        Days without a bucket are omitted, not zero-filled. Failures return
        an empty list.
        """
        async def _read() -> List[MetricPoint]:
            metric_name = check_name(name)
            start_day, end_day = parse_range(start, end)
            records = await self._repo.list_range(metric_name, start_day, end_day)
            return [
                MetricPoint(
                    date=r.metric_date,
                    value=r.metric_value,
                    metadata=dict(r.metadata_ or {}),
                )
                for r in records
            ]

        return await self._guard.run(
            "get_metric_range", _read, default=[], timeout=timeout,
            metric_name=name,
        )
