# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Recorder — Adds usage events to today's metric buckets.

Called inline from request handlers and workers. Telemetry is best-effort:
a failed write is logged and dropped, never raised into the caller's
workflow.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from kaiville_metrics.analytics.types import TrackItem, TrackResult, utc_today
from kaiville_metrics.analytics.validation import check_delta, check_metadata
from kaiville_metrics.core.vocabulary import MetricVocabulary
from kaiville_metrics.resilience.best_effort import BestEffort
from kaiville_metrics.storage.repositories import MetricRepository

logger = logging.getLogger("kaiville.recorder")


class Recorder:
    """Applies one increment to the (name, today) bucket."""

    def __init__(
        self,
        repo: MetricRepository,
        vocabulary: MetricVocabulary,
        guard: BestEffort,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._repo = repo
        self._vocabulary = vocabulary
        self._guard = guard
        self._clock = clock

    async def track_metric(
        self,
        name: Any,
        delta: int,
        metadata: Optional[Dict[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> bool:
        """Increment today's bucket for `name`. Returns False on any failure."""
        result = await self.record(TrackItem(name, delta, metadata), timeout=timeout)
        return result.ok

    async def record(
        self, item: Any, *, timeout: Optional[float] = None
    ) -> TrackResult:
        """Like track_metric, but reports why an item failed."""
        label = _label(item)

        async def _apply() -> TrackResult:
            track = TrackItem.coerce(item)
            delta = check_delta(track.delta)
            metadata = check_metadata(track.metadata)
            bucket, metadata = self._vocabulary.resolve(track.name, metadata)
            today = self._clock()
            await self._repo.increment(bucket, today, delta, metadata)
            logger.debug(
                "Tracked %s +%d", bucket, delta,
                extra={"metric_name": bucket, "metric_date": today},
            )
            return TrackResult(name=bucket, delta=delta, ok=True)

        return await self._guard.run(
            "track_metric",
            _apply,
            default=TrackResult(name=label, delta=_delta_of(item), ok=False),
            timeout=timeout,
            on_failure=lambda e: TrackResult(
                name=label, delta=_delta_of(item), ok=False, error=_describe(e),
            ),
            metric_name=label,
        )


class BatchRecorder:
    """Applies many increments concurrently through a Recorder."""

    def __init__(self, recorder: Recorder, guard: BestEffort) -> None:
        self._recorder = recorder
        self._guard = guard

    async def track_metrics(
        self, items: Iterable[Any], *, timeout: Optional[float] = None
    ) -> bool:
        """True only when every item was recorded."""
        batch = self._materialize(items)
        if batch is None:
            return False
        results = await self._record_all(batch, timeout)
        return all(r.ok for r in results)

    async def track_metrics_detailed(
        self, items: Iterable[Any], *, timeout: Optional[float] = None
    ) -> List[TrackResult]:
        """One TrackResult per item, in input order ([] if `items` cannot be read)."""
        batch = self._materialize(items)
        if batch is None:
            return []
        return await self._record_all(batch, timeout)

    def _materialize(self, items: Any) -> Optional[List[Any]]:
        try:
            return list(items)
        except Exception as e:
            logger.warning(
                "track_metrics rejected: cannot read batch items (%s: %s)",
                type(e).__name__, e, extra={"operation": "track_metrics"},
            )
            self._guard.telemetry.record_outcome("track_metrics", "rejected")
            return None

    async def _record_all(
        self, items: List[Any], timeout: Optional[float]
    ) -> List[TrackResult]:
        results = await asyncio.gather(
            *(self._recorder.record(item, timeout=timeout) for item in items)
        )
        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.warning("Batch tracking: %d of %d items failed", failed, len(results))
        return list(results)


def _label(item: Any) -> str:
    if isinstance(item, TrackItem):
        name = item.name
    elif isinstance(item, Mapping):
        name = item.get("name", item.get("metricName"))
    else:
        name = None
    return str(getattr(name, "value", name)) if name is not None else "<invalid>"


def _delta_of(item: Any) -> Any:
    if isinstance(item, TrackItem):
        return item.delta
    if isinstance(item, Mapping):
        return item.get("delta", item.get("value"))
    return None


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__
