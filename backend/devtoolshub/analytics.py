"""Analytics event normalisation and daily aggregation.

Pure functions only; storage lives in ``db.repositories`` and the request
flow in ``services.analytics_service``.
"""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from devtoolshub.results import ToolResult

MAX_EVENTS_PER_REQUEST = 100
MAX_PROPERTY_STRING = 2000
MAX_PROPERTY_ARRAY = 100

RANGE_PRESETS = ("24h", "7d", "30d")
DEFAULT_RANGE_PRESET = "7d"
UNKNOWN_TOOL = "unknown"

_OPTIONAL_TEXT_FIELDS = ("tool_name", "user_agent", "locale", "timezone", "soft_fingerprint")


@dataclass(frozen=True)
class PreparedEvents(ToolResult):
    records: list[dict[str, Any]] = field(default_factory=list)
    # HTTP status to answer with when ok is False
    status_code: int = 200

    @classmethod
    def rejected(cls, status_code: int, error: str) -> PreparedEvents:
        return cls(ok=False, error=error, status_code=status_code)


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


def _ensure_string(value: Any) -> str | None:
    return value if isinstance(value, str) and value.strip() else None


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sanitize_properties(value: Any) -> dict[str, Any] | None:
    """Keep JSON-safe properties, cutting oversized strings and arrays.

    Nested objects are cleaned recursively, other value types are dropped,
    and an empty result becomes None.
    """
    if not isinstance(value, dict):
        return None

    cleaned: dict[str, Any] = {}
    for key, item in value.items():
        if isinstance(item, str):
            cleaned[key] = item[:MAX_PROPERTY_STRING]
        elif item is None or isinstance(item, (bool, int, float)):
            cleaned[key] = item
        elif isinstance(item, list):
            cleaned[key] = item[:MAX_PROPERTY_ARRAY]
        elif isinstance(item, dict):
            cleaned[key] = sanitize_properties(item) or {}
    return cleaned or None


def extract_event_list(body: Any) -> list[Any]:
    """Accept ``[...]``, ``{"events": [...]}`` or a single event object."""
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        events = body.get("events")
        if isinstance(events, list):
            return events
        return [body]
    return []


def build_event_record(event: Any, now: datetime) -> dict[str, Any] | None:
    """Row values for one incoming event, or None when it lacks a required id."""
    if not isinstance(event, dict):
        return None

    anonymous_id = _ensure_string(event.get("anonymous_id"))
    session_id = _ensure_string(event.get("session_id"))
    event_name = _ensure_string(event.get("event_name"))
    if not anonymous_id or not session_id or not event_name:
        return None

    record: dict[str, Any] = {
        "id": uuid.uuid4(),
        "anonymous_id": anonymous_id,
        "session_id": session_id,
        "event_name": event_name,
        "properties": sanitize_properties(event.get("properties")),
        "created_at": _parse_timestamp(event.get("created_at")) or now,
        "received_at": now,
        "updated_at": now,
        "ip_hash": None,
    }
    for name in _OPTIONAL_TEXT_FIELDS:
        record[name] = _ensure_string(event.get(name))
    return record


def prepare_events(body: Any, now: datetime | None = None) -> PreparedEvents:
    now = now or datetime.now(timezone.utc)
    events = extract_event_list(body)
    if not events:
        return PreparedEvents.rejected(400, "No events provided")
    if len(events) > MAX_EVENTS_PER_REQUEST:
        return PreparedEvents.rejected(429, "Too many events in a single request")

    records = [record for record in (build_event_record(e, now) for e in events) if record]
    if not records:
        return PreparedEvents.rejected(400, "No valid events to store")
    return PreparedEvents(records=records, status_code=201)


def input_size_range(length: int) -> str:
    """Bucket an input length for event metadata instead of sending content."""
    if length == 0:
        return "empty"
    if length <= 100:
        return "0-100"
    if length <= 1_000:
        return "100-1k"
    if length <= 10_000:
        return "1k-10k"
    if length <= 100_000:
        return "10k-100k"
    return "100k+"


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime
    preset: str


@dataclass(frozen=True)
class SummaryEvent:
    created_at: datetime
    tool_name: str | None
    event_name: str


@dataclass
class SummaryBucket:
    date: str
    total: int = 0
    by_tool: Counter = field(default_factory=Counter)
    by_event: Counter = field(default_factory=Counter)


@dataclass(frozen=True)
class AnalyticsSummary:
    total_events: int
    buckets: list[SummaryBucket]


def compute_date_range(
    preset: str | None = None,
    start: str | None = None,
    end: str | None = None,
    now: datetime | None = None,
) -> DateRange:
    """Explicit ``start``/``end`` win when both parse and are ordered.

    Otherwise the window ends now and reaches back 24 hours, 7 days or
    30 days; unknown presets fall back to 7 days.
    """
    now = now or datetime.now(timezone.utc)
    start_at = _parse_timestamp(start)
    end_at = _parse_timestamp(end)
    if start_at and end_at and start_at <= end_at:
        return DateRange(start=start_at, end=end_at, preset=DEFAULT_RANGE_PRESET)

    chosen = preset if preset in RANGE_PRESETS else DEFAULT_RANGE_PRESET
    if chosen == "24h":
        begin = (now - timedelta(hours=24)).replace(second=0, microsecond=0)
    elif chosen == "30d":
        begin = now - timedelta(days=30)
    else:
        begin = now - timedelta(days=7)
    return DateRange(start=begin, end=now, preset=chosen)


def aggregate_events(events: list[SummaryEvent]) -> AnalyticsSummary:
    """Group events into UTC calendar-day buckets sorted by date."""
    buckets: dict[str, SummaryBucket] = {}
    for event in events:
        day = event.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d")
        bucket = buckets.setdefault(day, SummaryBucket(date=day))
        bucket.total += 1
        bucket.by_tool[event.tool_name or UNKNOWN_TOOL] += 1
        bucket.by_event[event.event_name] += 1

    return AnalyticsSummary(
        total_events=len(events),
        buckets=[buckets[day] for day in sorted(buckets)],
    )
