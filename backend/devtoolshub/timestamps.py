from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from devtoolshub.results import ToolResult

# +/- 100,000,000 days around the epoch, the browser Date range.
MIN_TIMESTAMP_MS = -8_640_000_000_000_000
MAX_TIMESTAMP_MS = 8_640_000_000_000_000

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

UTC = "UTC"
LOCAL = "local"

EMPTY_TIMESTAMP_ERROR = "Please enter a timestamp"
NOT_INTEGER_ERROR = "Timestamp must be an integer"
TIMESTAMP_RANGE_ERROR = "Timestamp is outside the supported range"
EMPTY_DATE_ERROR = "Please enter a date/time string"
UNPARSEABLE_DATE_ERROR = "Cannot parse this date/time, use ISO 8601 or YYYY-MM-DD HH:mm:ss"
DATE_RANGE_ERROR = "Date/time is outside the supported range"

_SPACE_BEFORE_TIME = re.compile(r"^(\d{4}-\d{2}-\d{2})\s+(\d)")


class TimestampUnit(str, Enum):
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"


@dataclass(frozen=True)
class Timestamps:
    seconds: int
    milliseconds: int


@dataclass(frozen=True)
class TimestampValidation(ToolResult):
    value: int = 0


@dataclass(frozen=True)
class ParsedDate(ToolResult):
    value: datetime | None = None


class UnknownTimezoneError(ValueError):
    pass


class TimestampRangeError(ValueError):
    """The instant exists in UTC but not in the target zone (years 1-9999)."""


def _to_ms(value: int, unit: TimestampUnit) -> int:
    return value * 1000 if unit is TimestampUnit.SECONDS else value


def _parse_integer(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")) or not number.is_integer():
        return None
    return int(number)


def validate_timestamp_input(text: str, unit: TimestampUnit) -> TimestampValidation:
    """Check that *text* is an integer timestamp inside the supported range."""
    trimmed = text.strip()
    if not trimmed:
        return TimestampValidation.failure(EMPTY_TIMESTAMP_ERROR)
    number = _parse_integer(trimmed)
    if number is None:
        return TimestampValidation.failure(NOT_INTEGER_ERROR)
    if not MIN_TIMESTAMP_MS <= _to_ms(number, unit) <= MAX_TIMESTAMP_MS:
        return TimestampValidation.failure(TIMESTAMP_RANGE_ERROR)
    return TimestampValidation(value=number)


def timestamp_to_datetime(value: int, unit: TimestampUnit) -> datetime | None:
    """UTC datetime for *value*, or None when it cannot be represented."""
    ms = _to_ms(value, unit)
    if not MIN_TIMESTAMP_MS <= ms <= MAX_TIMESTAMP_MS:
        return None
    try:
        return EPOCH + timedelta(milliseconds=ms)
    except OverflowError:
        # datetime only covers years 1-9999
        return None


def datetime_to_timestamp(moment: datetime) -> Timestamps:
    ms = (moment - EPOCH) // timedelta(milliseconds=1)
    return Timestamps(seconds=ms // 1000, milliseconds=ms)


def current_timestamp() -> Timestamps:
    ms = time.time_ns() // 1_000_000
    return Timestamps(seconds=ms // 1000, milliseconds=ms)


def resolve_timezone(name: str) -> tzinfo:
    """``UTC``, ``local`` (the server's zone) or an IANA zone name."""
    if name == UTC:
        return timezone.utc
    if name == LOCAL:
        return datetime.now().astimezone().tzinfo
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise UnknownTimezoneError(f"Unknown time zone: {name}") from exc


def format_datetime_in_timezone(moment: datetime, timezone_name: str) -> str:
    """``YYYY-MM-DDTHH:mm:ss`` wall-clock time of *moment* in the zone."""
    zone = resolve_timezone(timezone_name)
    try:
        local = moment.astimezone(zone)
    except (OverflowError, ValueError) as exc:
        raise TimestampRangeError(TIMESTAMP_RANGE_ERROR) from exc
    return (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d}"
        f"T{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
    )


def parse_date_string(text: str, timezone_name: str = LOCAL) -> ParsedDate:
    """Parse ISO 8601 or ``YYYY-MM-DD HH:mm:ss``.

    Strings without an explicit offset are read as wall-clock time in
    *timezone_name*; the result is always converted to UTC.
    """
    trimmed = text.strip()
    if not trimmed:
        return ParsedDate.failure(EMPTY_DATE_ERROR)
    normalized = _SPACE_BEFORE_TIME.sub(r"\1T\2", trimmed)

    try:
        zone = resolve_timezone(timezone_name)
    except UnknownTimezoneError as exc:
        return ParsedDate.failure(str(exc))

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return ParsedDate.failure(UNPARSEABLE_DATE_ERROR)

    try:
        if parsed.tzinfo is None:
            parsed = parsed.astimezone() if timezone_name == LOCAL else parsed.replace(tzinfo=zone)
        return ParsedDate(value=parsed.astimezone(timezone.utc))
    except (OverflowError, ValueError):
        return ParsedDate.failure(DATE_RANGE_ERROR)
