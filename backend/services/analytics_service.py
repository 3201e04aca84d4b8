import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from db import repositories
from devtoolshub.analytics import (
    SummaryEvent,
    aggregate_events,
    compute_date_range,
    prepare_events,
)
from schemas.api import (
    AnalyticsSummaryResponse,
    SummaryBucketResponse,
    SummaryData,
    SummaryFilters,
    SummaryRange,
    SummaryTotals,
)

logger = logging.getLogger(__name__)


async def ingest_events(
    db: AsyncSession,
    body: Any,
    now: datetime | None = None,
) -> int:
    """Validate an event batch and store it. Returns the number stored."""
    prepared = prepare_events(body, now)
    if not prepared.ok:
        raise HTTPException(status_code=prepared.status_code, detail=prepared.error)

    try:
        stored = await repositories.create_analytics_events(db, prepared.records)
    except Exception:
        logger.exception("Failed to store %d analytics events", len(prepared.records))
        raise HTTPException(status_code=500, detail="Failed to store events")

    logger.info("Stored %d analytics events", stored)
    return stored


async def get_summary(
    db: AsyncSession,
    preset: str | None = None,
    start: str | None = None,
    end: str | None = None,
    tool_name: str | None = None,
    event_name: str | None = None,
    now: datetime | None = None,
) -> AnalyticsSummaryResponse:
    """Daily event counts for the requested window."""
    window = compute_date_range(preset, start, end, now or datetime.now(timezone.utc))

    try:
        rows = await repositories.list_events_for_summary(
            db, window.start, window.end, tool_name=tool_name, event_name=event_name
        )
    except Exception:
        logger.exception("Analytics summary query failed")
        raise HTTPException(status_code=500, detail="Failed to query analytics summary")

    summary = aggregate_events([
        SummaryEvent(created_at=row.created_at, tool_name=row.tool_name, event_name=row.event_name)
        for row in rows
    ])

    return AnalyticsSummaryResponse(
        range=SummaryRange(
            preset=window.preset,
            start=window.start.isoformat(),
            end=window.end.isoformat(),
        ),
        filters=SummaryFilters(tool_name=tool_name, event_name=event_name),
        data=SummaryData(
            totals=SummaryTotals(events=summary.total_events),
            buckets=[
                SummaryBucketResponse(
                    date=bucket.date,
                    total=bucket.total,
                    by_tool=dict(bucket.by_tool),
                    by_event=dict(bucket.by_event),
                )
                for bucket in summary.buckets
            ],
        ),
    )
