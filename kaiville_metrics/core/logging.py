# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Structured Logging — JSON format with trace and metric-bucket context.
"""

from __future__ import annotations

import json
import logging
import sys

CONTEXT_KEYS = ("trace_id", "operation", "metric_name", "metric_date")

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class StructuredFormatter(logging.Formatter):
    """JSON log formatter with trace/operation/bucket context."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        # Attach context passed through `extra=`
        for key in CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val:
                log_entry[key] = str(val)

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure root logging for the metrics service."""
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
