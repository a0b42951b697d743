# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Input Validation — Checks applied at the engine boundary.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from kaiville_metrics.core.errors import (
    InvalidDateError,
    InvalidDeltaError,
    InvalidMetadataError,
    InvalidRangeError,
    UnknownMetricError,
)
from kaiville_metrics.core.vocabulary import normalize_name


def check_delta(delta: Any) -> int:
    # bool is an int subclass; True is not a count
    if isinstance(delta, bool) or not isinstance(delta, int) or delta < 0:
        raise InvalidDeltaError(delta)
    return delta


def check_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if metadata is None:
        return {}
    if not isinstance(metadata, Mapping):
        raise InvalidMetadataError(f"expected a mapping, got {type(metadata).__name__}")
    for key in metadata:
        if not isinstance(key, str) or not key:
            raise InvalidMetadataError(f"keys must be non-empty strings, got {key!r}")
        if '"' in key:
            raise InvalidMetadataError(f"keys may not contain double quotes: {key!r}")
    return dict(metadata)


def check_name(name: Any) -> str:
    """Name for read paths: any non-empty string (no allow-list needed to read)."""
    normalized = normalize_name(name)
    if not normalized:
        raise UnknownMetricError(name)
    return normalized


def parse_date(value: Any) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDateError(value) from None
    raise InvalidDateError(value)


def parse_range(start: Any, end: Any) -> Tuple[date, date]:
    start_day, end_day = parse_date(start), parse_date(end)
    if start_day > end_day:
        raise InvalidRangeError(start_day, end_day)
    return start_day, end_day


def day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    """[start 00:00 UTC, end+1 00:00 UTC): the whole of every day in the range."""
    since = datetime.combine(start, time.min, tzinfo=timezone.utc)
    until = datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return since, until
