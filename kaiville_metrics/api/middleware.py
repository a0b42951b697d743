# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
API Middleware — Trace IDs, request timing and HTTP telemetry.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("kaiville.api")

TRACE_HEADER = "X-Trace-Id"


class TraceMiddleware(BaseHTTPMiddleware):
    """
    Propagates (or mints) an X-Trace-Id for every request, logs its duration
    and feeds request counts and latency into the engine telemetry when an
    engine is attached to app.state.
    """

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex
        request.state.trace_id = trace_id

        start = time.monotonic()
        response: Response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000

        response.headers[TRACE_HEADER] = trace_id
        engine = getattr(request.app.state, "engine", None)
        if engine is not None:
            engine.telemetry.inc("http.requests")
            engine.telemetry.inc(f"http.{response.status_code // 100}xx")
            engine.telemetry.observe("http_request_ms", elapsed_ms)

        logger.info(
            "[api] %s %s → %d (%.0fms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
            extra={"trace_id": trace_id},
        )
        return response
