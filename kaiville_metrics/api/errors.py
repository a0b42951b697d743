# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
API Error Handling — Unified error structure.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.trace_id = trace_id or str(uuid.uuid4())
        super().__init__(message)


class MetricsUnavailableError(APIError):
    """The engine could not compute a figure; shown instead of zeros."""

    def __init__(self, what: str, trace_id: str = None):
        super().__init__(
            code="METRICS_UNAVAILABLE",
            message=f"{what} is temporarily unavailable",
            status_code=503,
            trace_id=trace_id,
        )


class InvalidRangeAPIError(APIError):
    def __init__(self, start: Any, end: Any, trace_id: str = None):
        super().__init__(
            code="INVALID_RANGE",
            message=f"Range start {start} is after end {end}",
            status_code=422,
            details={"start": str(start), "end": str(end)},
            trace_id=trace_id,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Global exception handler for APIError."""
    trace_id = getattr(request.state, "trace_id", None) or exc.trace_id
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": exc.message,
            "trace_id": trace_id,
            "details": exc.details,
        },
    )
