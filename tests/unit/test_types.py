# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.
"""Unit tests for engine result types."""

from datetime import date

import pytest

from kaiville_metrics.analytics.types import MetricPoint, TrackItem, utc_today
from kaiville_metrics.core.errors import MetricValidationError
from kaiville_metrics.core.vocabulary import MetricName


class TestTrackItem:
    def test_coerce_passthrough(self):
        item = TrackItem(MetricName.VOTES_CAST, 1)
        assert TrackItem.coerce(item) is item

    def test_coerce_mapping(self):
        item = TrackItem.coerce({"name": "votes_cast", "delta": 2, "metadata": {"k": "v"}})
        assert item == TrackItem("votes_cast", 2, {"k": "v"})

    def test_coerce_instrumentation_keys(self):
        item = TrackItem.coerce({"metricName": "llm_api_calls", "value": 1})
        assert item.name == "llm_api_calls"
        assert item.delta == 1

    def test_coerce_zero_delta_kept(self):
        assert TrackItem.coerce({"name": "votes_cast", "delta": 0}).delta == 0

    @pytest.mark.parametrize("bad", [None, "votes_cast", {"name": "votes_cast"}, {"delta": 1}])
    def test_coerce_invalid(self, bad):
        with pytest.raises(MetricValidationError):
            TrackItem.coerce(bad)


class TestMetricPoint:
    def test_to_dict_copies_metadata(self):
        meta = {"a": 1}
        d = MetricPoint(date(2026, 1, 2), 3, meta).to_dict()
        assert d == {"date": "2026-01-02", "value": 3, "metadata": {"a": 1}}
        assert d["metadata"] is not meta


def test_utc_today_is_date():
    assert isinstance(utc_today(), date)
