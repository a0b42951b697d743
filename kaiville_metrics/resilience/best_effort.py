# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Best-Effort Boundary — Turns store failures into safe defaults.

Every public engine operation runs through BestEffort.run():
  - validation errors  → WARNING log, outcome "rejected", default returned
  - store errors       → ERROR log, outcome "failed", default returned
  - caller deadline    → same as a store error
  - anything else      → ERROR log with traceback, outcome "failed"

Task cancellation (asyncio.CancelledError) is not an Exception and passes
through untouched.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from kaiville_metrics.core.errors import MetricValidationError, StoreUnavailable
from kaiville_metrics.core.telemetry import EngineTelemetry

logger = logging.getLogger("kaiville.best_effort")

T = TypeVar("T")

STORE_ERRORS = (SQLAlchemyError, OSError, ConnectionError, asyncio.TimeoutError, StoreUnavailable)


class BestEffort:
    """Runs engine operations so that callers never see an exception."""

    def __init__(self, telemetry: Optional[EngineTelemetry] = None) -> None:
        self._telemetry = telemetry or EngineTelemetry()

    @property
    def telemetry(self) -> EngineTelemetry:
        return self._telemetry

    async def run(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        default: T,
        timeout: Optional[float] = None,
        on_failure: Optional[Callable[[Exception], T]] = None,
        **context: Any,
    ) -> T:
        """
        Await `call()` and return its result, or a fallback on failure.

        Args:
            operation: Name used in logs and telemetry (e.g. "track_metric").
            call: Zero-argument coroutine factory doing the store work.
            default: Value returned when the call fails.
            timeout: Optional caller deadline in seconds.
            on_failure: Builds the fallback from the error instead of `default`.
            context: Extra log fields (metric_name, metric_date, ...).
        """
        extra = {"operation": operation, **context}
        start = time.monotonic()
        try:
            if timeout is not None:
                result = await asyncio.wait_for(call(), timeout=timeout)
            else:
                result = await call()
        except MetricValidationError as e:
            logger.warning("%s rejected: %s", operation, e, extra=extra)
            self._telemetry.record_outcome(operation, "rejected")
            return on_failure(e) if on_failure else default
        except STORE_ERRORS as e:
            failure = e if isinstance(e, StoreUnavailable) else StoreUnavailable(operation, e)
            logger.error("%s", failure, extra=extra)
            self._telemetry.record_outcome(operation, "failed")
            return on_failure(failure) if on_failure else default
        except Exception as e:
            logger.exception("%s failed unexpectedly", operation, extra=extra)
            self._telemetry.record_outcome(operation, "failed")
            return on_failure(e) if on_failure else default

        elapsed_ms = (time.monotonic() - start) * 1000
        self._telemetry.observe(f"{operation}_ms", elapsed_ms)
        self._telemetry.record_outcome(operation, "ok")
        return result


async def gather_all(*aws: Awaitable[Any]) -> list:
    """
    Run awaitables concurrently and re-raise the first failure.

    Unlike a bare gather, every sibling is allowed to finish before the
    error is raised, so no orphaned query keeps running after we return.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for r in results:
        if isinstance(r, BaseException):
            raise r
    return list(results)
