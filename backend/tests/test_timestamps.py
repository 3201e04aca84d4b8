"""Tests for devtoolshub.timestamps."""

from __future__ import annotations

import time
from datetime import datetime, timezone

import pytest

from devtoolshub.timestamps import (
    DATE_RANGE_ERROR,
    EMPTY_DATE_ERROR,
    EMPTY_TIMESTAMP_ERROR,
    NOT_INTEGER_ERROR,
    TIMESTAMP_RANGE_ERROR,
    UNPARSEABLE_DATE_ERROR,
    TimestampRangeError,
    TimestampUnit,
    UnknownTimezoneError,
    current_timestamp,
    datetime_to_timestamp,
    format_datetime_in_timezone,
    parse_date_string,
    resolve_timezone,
    timestamp_to_datetime,
    validate_timestamp_input,
)


class TestValidateTimestampInput:
    def test_accepts_integer(self):
        result = validate_timestamp_input(" 1700000000 ", TimestampUnit.SECONDS)
        assert result.ok
        assert result.value == 1700000000

    def test_accepts_integral_float_notation(self):
        assert validate_timestamp_input("1e3", TimestampUnit.MILLISECONDS).value == 1000

    @pytest.mark.parametrize(
        "text, error",
        [
            ("", EMPTY_TIMESTAMP_ERROR),
            ("12.5", NOT_INTEGER_ERROR),
            ("abc", NOT_INTEGER_ERROR),
            ("nan", NOT_INTEGER_ERROR),
            ("8640000000000001", TIMESTAMP_RANGE_ERROR),
        ],
    )
    def test_rejections(self, text: str, error: str):
        assert validate_timestamp_input(text, TimestampUnit.SECONDS).error == error

    def test_range_depends_on_unit(self):
        assert validate_timestamp_input("8640000000000001", TimestampUnit.MILLISECONDS).error == TIMESTAMP_RANGE_ERROR
        assert validate_timestamp_input("8640000000000000", TimestampUnit.MILLISECONDS).ok


class TestConversions:
    def test_seconds_to_datetime(self):
        assert timestamp_to_datetime(0, TimestampUnit.SECONDS) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_milliseconds_keep_fraction(self):
        moment = timestamp_to_datetime(1_500, TimestampUnit.MILLISECONDS)
        assert moment == datetime(1970, 1, 1, 0, 0, 1, 500_000, tzinfo=timezone.utc)

    def test_negative_timestamps(self):
        assert timestamp_to_datetime(-86400, TimestampUnit.SECONDS) == datetime(1969, 12, 31, tzinfo=timezone.utc)

    def test_beyond_datetime_range_is_none(self):
        # Inside the browser range but past year 9999
        assert timestamp_to_datetime(8_000_000_000_000_000, TimestampUnit.MILLISECONDS) is None

    def test_datetime_to_timestamp(self):
        stamps = datetime_to_timestamp(datetime(2024, 1, 1, 0, 0, 0, 250_000, tzinfo=timezone.utc))
        assert stamps.seconds == 1704067200
        assert stamps.milliseconds == 1704067200250

    def test_negative_seconds_round_down(self):
        stamps = datetime_to_timestamp(datetime(1969, 12, 31, 23, 59, 59, 500_000, tzinfo=timezone.utc))
        assert stamps.milliseconds == -500
        assert stamps.seconds == -1

    def test_current_timestamp(self):
        before = int(time.time())
        stamps = current_timestamp()
        assert before <= stamps.seconds <= before + 2
        assert stamps.milliseconds // 1000 == stamps.seconds


class TestTimezones:
    def test_resolve(self):
        assert resolve_timezone("UTC") is timezone.utc
        assert resolve_timezone("local") is not None
        assert str(resolve_timezone("Asia/Shanghai")) == "Asia/Shanghai"

    def test_unknown_zone(self):
        with pytest.raises(UnknownTimezoneError, match="Unknown time zone: Mars/Base"):
            resolve_timezone("Mars/Base")

    def test_format_in_zone(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert format_datetime_in_timezone(moment, "UTC") == "2024-01-01T00:00:00"
        assert format_datetime_in_timezone(moment, "Asia/Shanghai") == "2024-01-01T08:00:00"

    @pytest.mark.parametrize(
        "moment, zone",
        [
            (datetime(1, 1, 1, tzinfo=timezone.utc), "America/New_York"),
            (datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc), "Asia/Tokyo"),
        ],
    )
    def test_wall_clock_outside_datetime_range(self, moment, zone):
        with pytest.raises(TimestampRangeError, match=TIMESTAMP_RANGE_ERROR):
            format_datetime_in_timezone(moment, zone)

    def test_unknown_zone_checked_first(self):
        with pytest.raises(UnknownTimezoneError):
            format_datetime_in_timezone(datetime(1, 1, 1, tzinfo=timezone.utc), "Mars/Base")


class TestParseDateString:
    """ISO 8601 and ``YYYY-MM-DD HH:mm:ss`` parsing."""

    def test_space_separated_in_zone(self):
        parsed = parse_date_string("2024-01-01 08:00:00", "Asia/Shanghai")
        assert parsed.value == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_explicit_offset_wins(self):
        parsed = parse_date_string("2024-01-01T00:00:00+02:00", "Asia/Shanghai")
        assert parsed.value == datetime(2023, 12, 31, 22, tzinfo=timezone.utc)

    def test_date_only_is_midnight(self):
        assert parse_date_string("2024-03-05", "UTC").value == datetime(2024, 3, 5, tzinfo=timezone.utc)

    def test_result_is_utc(self):
        assert parse_date_string("2024-03-05 12:00", "UTC").value.tzinfo is timezone.utc

    def test_local_zone_parses(self):
        assert parse_date_string("2024-03-05 12:00:00").ok

    @pytest.mark.parametrize("text, error", [("", EMPTY_DATE_ERROR), ("not a date", UNPARSEABLE_DATE_ERROR)])
    def test_errors(self, text: str, error: str):
        assert parse_date_string(text, "UTC").error == error

    def test_unknown_zone_is_an_error_value(self):
        assert parse_date_string("2024-01-01", "Mars/Base").error == "Unknown time zone: Mars/Base"

    def test_year_one_in_eastern_zone_overflows(self):
        assert parse_date_string("0001-01-01 00:00:00", "Asia/Shanghai").error == DATE_RANGE_ERROR
