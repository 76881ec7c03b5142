"""Tests for timestamp normalization and rendering."""

from datetime import datetime, timezone

import pytest

from orgcal.core.options import ExportOptions
from orgcal.core.outline import DateSpec, InvalidInput, Repeater, Timestamp
from orgcal.core.timestamps import (
    dtstamp,
    format_timestamp,
    normalize,
    now_timestamp,
    rrule,
)


@pytest.fixture
def options():
    return ExportOptions()


def timed(hour, minute=0, end=None, day=1):
    ts_end = DateSpec(2024, 3, day, *end) if end else None
    return Timestamp(start=DateSpec(2024, 3, day, hour, minute), end=ts_end)


class TestNormalize:
    def test_date_only_start(self):
        ts = Timestamp(start=DateSpec(2024, 3, 1))
        assert normalize(ts) == datetime(2024, 3, 1)

    def test_date_only_end_is_next_day(self):
        ts = Timestamp(start=DateSpec(2024, 3, 1))
        assert normalize(ts, want_end=True) == datetime(2024, 3, 2)

    def test_date_only_end_crosses_month(self):
        ts = Timestamp(start=DateSpec(2024, 2, 29))
        assert normalize(ts, want_end=True) == datetime(2024, 3, 1)

    def test_date_only_explicit_end(self):
        ts = Timestamp(start=DateSpec(2024, 3, 1), end=DateSpec(2024, 3, 3))
        assert normalize(ts, want_end=True) == datetime(2024, 3, 3)

    def test_timed_start(self):
        assert normalize(timed(9, 30)) == datetime(2024, 3, 1, 9, 30)

    def test_point_event_defaults_to_two_hours(self):
        assert normalize(timed(9), want_end=True) == datetime(2024, 3, 1, 11, 0)

    def test_point_event_with_default_duration(self):
        assert normalize(timed(9), want_end=True, default_duration=45) == datetime(2024, 3, 1, 9, 45)

    def test_explicit_range_wins_over_default_duration(self):
        ts = timed(9, 0, end=(10, 30))
        assert normalize(ts, want_end=True, default_duration=45) == datetime(2024, 3, 1, 10, 30)

    def test_minute_overflow_carries(self):
        ts = Timestamp(start=DateSpec(2024, 3, 1, 23, 75))
        assert normalize(ts) == datetime(2024, 3, 2, 0, 15)

    def test_default_duration_overflow_carries_into_next_day(self):
        ts = timed(23, 30)
        assert normalize(ts, want_end=True, default_duration=90) == datetime(2024, 3, 2, 1, 0)

    def test_missing_start_raises(self):
        with pytest.raises(InvalidInput):
            normalize(Timestamp())


class TestFormatTimestamp:
    def test_date_only(self, options):
        ts = Timestamp(start=DateSpec(2024, 3, 1))
        assert format_timestamp(ts, "DTSTART", options) == "DTSTART;VALUE=DATE:20240301"
        assert format_timestamp(ts, "DTEND", options, want_end=True) == "DTEND;VALUE=DATE:20240302"

    def test_timed_point(self, options):
        ts = timed(9)
        assert format_timestamp(ts, "DTSTART", options) == "DTSTART:20240301T090000"
        assert format_timestamp(ts, "DTEND", options, want_end=True) == "DTEND:20240301T110000"

    def test_configured_timezone_keeps_plain_local_time(self):
        options = ExportOptions(timezone="America/New_York")
        assert format_timestamp(timed(9), "DTSTART", options) == "DTSTART:20240301T090000"
        assert format_timestamp(timed(9), "DTEND", options, want_end=True) == "DTEND:20240301T110000"

    def test_timezone_placeholder_in_format(self):
        options = ExportOptions(timezone="Europe/Berlin", date_time_format=";TZID=%Z:%Y%m%dT%H%M%S")
        assert format_timestamp(timed(9), "DTSTART", options) == "DTSTART;TZID=Europe/Berlin:20240301T090000"

    def test_utc_format_converts_local_time(self):
        options = ExportOptions(timezone="Europe/Paris", date_time_format=":%Y%m%dT%H%M%SZ")
        assert format_timestamp(timed(9), "DTSTART", options) == "DTSTART:20240301T080000Z"

    def test_utc_requested(self):
        options = ExportOptions(timezone="Europe/Paris")
        assert format_timestamp(timed(9), "X", options, utc=True) == "X:20240301T080000Z"

    def test_entry_timezone_overrides_config(self):
        options = ExportOptions(timezone="Europe/Paris")
        result = format_timestamp(timed(9), "DTSTART", options, tz="America/New_York")
        assert result == "DTSTART;TZID=America/New_York:20240301T090000"


class TestHelpers:
    def test_dtstamp_is_utc(self):
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert dtstamp(now) == "DTSTAMP:20240301T120000Z"

    def test_rrule_from_repeater(self):
        ts = Timestamp(start=DateSpec(2024, 3, 1), repeater=Repeater("week", 2))
        assert rrule(ts) == "RRULE:FREQ=WEEKLY;INTERVAL=2"

    def test_rrule_unsupported_unit(self):
        ts = Timestamp(start=DateSpec(2024, 3, 1), repeater=Repeater("fortnight", 1))
        assert rrule(ts) is None

    def test_rrule_without_repeater(self):
        assert rrule(Timestamp(start=DateSpec(2024, 3, 1))) is None

    def test_now_timestamp_in_zone(self):
        now = datetime(2024, 3, 1, 12, 34, 56, tzinfo=timezone.utc)
        ts = now_timestamp(now, "Europe/Paris")
        assert ts.start == DateSpec(2024, 3, 1, 13, 34)
