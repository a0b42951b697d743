# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Engine Telemetry — In-memory counters describing the engine itself.

These numbers answer "is the metrics engine healthy?" (how many writes were
dropped, how slow the store is). They are per-process and never persisted;
the persisted usage counters live in research_analytics.
"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Dict


class EngineTelemetry:
    """Simple in-memory counters, gauges and latency histograms."""

    MAX_OBSERVATIONS = 1000

    def __init__(self):
        self._counters: Dict[str, int] = defaultdict(int)
        self._gauges: Dict[str, float] = {}
        self._histograms: Dict[str, list] = defaultdict(list)
        self._start_time = time.time()

    # ── Counters ────────────────────────────────────────────────

    def inc(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def record_outcome(self, operation: str, outcome: str) -> None:
        """Count one operation result, e.g. ("track_metric", "failed")."""
        self.inc(f"{operation}.{outcome}")

    # ── Gauges ──────────────────────────────────────────────────

    def set_gauge(self, name: str, value: float) -> None:
        self._gauges[name] = value

    def get_gauge(self, name: str) -> float:
        return self._gauges.get(name, 0.0)

    # ── Histograms (store latency) ──────────────────────────────

    def observe(self, name: str, value: float) -> None:
        """Record an observation (e.g. store round-trip in ms)."""
        values = self._histograms[name]
        values.append(value)
        if len(values) > self.MAX_OBSERVATIONS:
            self._histograms[name] = values[-self.MAX_OBSERVATIONS:]

    # ── Export ──────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Export all telemetry as a dict."""
        result = {
            "uptime_seconds": round(time.time() - self._start_time, 1),
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
        }
        for name, values in self._histograms.items():
            if values:
                result[f"histogram_{name}"] = {
                    "count": len(values),
                    "avg": round(sum(values) / len(values), 2),
                    "max": round(max(values), 2),
                    "min": round(min(values), 2),
                }
        return result
