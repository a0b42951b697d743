# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.
"""Unit tests for engine input validation."""

from datetime import date, datetime, timedelta, timezone

import pytest

from kaiville_metrics.analytics.validation import (
    check_delta,
    check_metadata,
    check_name,
    day_bounds,
    parse_date,
    parse_range,
)
from kaiville_metrics.core.errors import (
    InvalidDateError,
    InvalidDeltaError,
    InvalidMetadataError,
    InvalidRangeError,
    MetricValidationError,
    UnknownMetricError,
)


class TestCheckDelta:
    def test_accepts_zero_and_positive(self):
        assert check_delta(0) == 0
        assert check_delta(1500) == 1500

    @pytest.mark.parametrize("bad", [-1, 1.5, "3", None, True])
    def test_rejects(self, bad):
        with pytest.raises(InvalidDeltaError):
            check_delta(bad)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            check_delta(-5)


class TestCheckMetadata:
    def test_none_is_empty(self):
        assert check_metadata(None) == {}

    def test_copies(self):
        src = {"model": "gpt"}
        out = check_metadata(src)
        assert out == src and out is not src

    def test_rejects_non_mapping(self):
        with pytest.raises(InvalidMetadataError):
            check_metadata(["a"])

    def test_rejects_bad_keys(self):
        with pytest.raises(InvalidMetadataError):
            check_metadata({1: "x"})
        with pytest.raises(InvalidMetadataError):
            check_metadata({"": "x"})
        with pytest.raises(InvalidMetadataError):
            check_metadata({'a"b': "x"})


class TestCheckName:
    def test_any_non_empty_name_readable(self):
        assert check_name(" retired_metric ") == "retired_metric"

    def test_empty(self):
        with pytest.raises(UnknownMetricError):
            check_name("")


class TestDates:
    def test_parse_iso(self):
        assert parse_date("2026-03-14") == date(2026, 3, 14)

    def test_parse_date_passthrough(self):
        d = date(2026, 1, 1)
        assert parse_date(d) is d

    def test_parse_aware_datetime_uses_utc(self):
        tz = timezone(timedelta(hours=-8))
        assert parse_date(datetime(2026, 3, 14, 20, 0, tzinfo=tz)) == date(2026, 3, 15)

    @pytest.mark.parametrize("bad", ["14/03/2026", "", 20260314, None])
    def test_parse_invalid(self, bad):
        with pytest.raises(InvalidDateError):
            parse_date(bad)

    def test_range_single_day(self):
        assert parse_range("2026-03-14", date(2026, 3, 14)) == (date(2026, 3, 14), date(2026, 3, 14))

    def test_range_inverted(self):
        with pytest.raises(InvalidRangeError):
            parse_range("2026-03-15", "2026-03-14")

    def test_all_validation_errors_share_base(self):
        assert issubclass(InvalidRangeError, MetricValidationError)
        assert issubclass(UnknownMetricError, MetricValidationError)

    def test_day_bounds_cover_whole_days(self):
        since, until = day_bounds(date(2026, 3, 1), date(2026, 3, 31))
        assert since == datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert until == datetime(2026, 4, 1, tzinfo=timezone.utc)
