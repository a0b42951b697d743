# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Engine Result Types — Values handed back to callers.

Nothing here is persisted; DashboardSummary and approval rates are computed
per call and owned by whoever asked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from kaiville_metrics.core.errors import MetricValidationError
from kaiville_metrics.core.vocabulary import MetricName


def utc_today() -> date:
    """Current calendar date in UTC (the bucket key for new increments)."""
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class MetricPoint:
    """One stored bucket of a range query."""
    date: date
    value: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "value": self.value,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class DashboardTotals:
    articles: int
    pending_moderation: int
    users: int


@dataclass(frozen=True)
class DashboardSummary:
    """
    Today's counters plus live content totals.

    The four underlying reads are not taken from one snapshot, so the
    figures can disagree slightly when moderation happens mid-call.
    """
    date: date
    today: Dict[str, int]
    totals: DashboardTotals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "today": dict(self.today),
            "totals": {
                "articles": self.totals.articles,
                "pendingModeration": self.totals.pending_moderation,
                "users": self.totals.users,
            },
        }


@dataclass(frozen=True)
class TrackItem:
    """One increment in a batch."""
    name: Union[str, MetricName]
    delta: int
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def coerce(cls, item: Any) -> "TrackItem":
        """
        Accept a TrackItem or a mapping.

        Mappings may use the instrumentation-style keys metricName/value in
        place of name/delta.
        """
        if isinstance(item, TrackItem):
            return item
        if not isinstance(item, Mapping):
            raise MetricValidationError(f"Batch item must be a mapping, got {type(item).__name__}")

        name = item.get("name", item.get("metricName"))
        delta = item.get("delta", item.get("value"))
        if name is None or delta is None:
            raise MetricValidationError(f"Batch item needs a name and a delta: {dict(item)!r}")
        return cls(name=name, delta=delta, metadata=item.get("metadata"))


@dataclass(frozen=True)
class TrackResult:
    """Outcome of one item in a batch."""
    name: str
    delta: Any
    ok: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "delta": self.delta, "ok": self.ok, "error": self.error}
