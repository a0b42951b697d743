# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Kaiville Metrics — daily usage counters and derived research-center figures.
"""

__version__ = "0.1.0"
