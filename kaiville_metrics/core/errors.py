# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Engine Errors — Internal failure taxonomy.

None of these reach instrumentation call sites: the engine catches them at
the operation boundary and degrades to a safe default.
"""

from __future__ import annotations

from typing import Any


class MetricsError(Exception):
    """Base class for metrics engine failures."""


class StoreUnavailable(MetricsError):
    """The metric store or the content store could not answer."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: store unavailable ({type(cause).__name__}: {cause})")


class MetricValidationError(MetricsError, ValueError):
    """Input rejected at the engine boundary."""


class UnknownMetricError(MetricValidationError):
    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"Unrecognized metric name '{name}'")


class InvalidDeltaError(MetricValidationError):
    def __init__(self, delta: Any):
        self.delta = delta
        super().__init__(f"Metric delta must be a non-negative integer, got {delta!r}")


class InvalidDateError(MetricValidationError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Expected a date or 'YYYY-MM-DD' string, got {value!r}")


class InvalidRangeError(MetricValidationError):
    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__(f"Range start {start} is after end {end}")


class InvalidMetadataError(MetricValidationError):
    def __init__(self, detail: str):
        super().__init__(f"Invalid metric metadata: {detail}")
