"""Unit tests for date bound parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from fleet_governance.utils.time_utils import ensure_utc, parse_bound


def test_date_only_start_of_day():
    assert parse_bound("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_date_only_end_of_day():
    bound = parse_bound("2024-03-01", end_of_day=True)
    assert bound == datetime(2024, 3, 1, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_datetime_with_z_suffix():
    assert parse_bound("2024-03-01T10:15:00Z") == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)


def test_datetime_with_offset_is_converted_to_utc():
    assert parse_bound("2024-03-01T10:00:00+02:00") == datetime(2024, 3, 1, 8, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", [None, "", "   ", "garbage", "2024-02-30", "yesterday-ish"])
def test_unset_or_malformed_bounds_are_none(raw):
    assert parse_bound(raw) is None


def test_ensure_utc_attaches_zone_to_naive():
    assert ensure_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc


def test_ensure_utc_converts_aware():
    aware = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=-5)))
    assert ensure_utc(aware) == datetime(2024, 1, 1, 17, tzinfo=timezone.utc)
