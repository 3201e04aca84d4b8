import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import AnalyticsEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Analytics events
# ---------------------------------------------------------------------------

async def create_analytics_events(
    db: AsyncSession,
    records: list[dict],
) -> int:
    """Insert prepared event rows and return how many were added.

    Each dict carries the column values built by
    ``devtoolshub.analytics.build_event_record``.
    """
    if not records:
        return 0

    db.add_all([AnalyticsEvent(**record) for record in records])
    await db.flush()
    return len(records)


async def list_events_for_summary(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    tool_name: str | None = None,
    event_name: str | None = None,
) -> list[AnalyticsEvent]:
    """Events created within [start, end], oldest first, optionally filtered."""
    stmt = (
        select(AnalyticsEvent)
        .where(AnalyticsEvent.created_at >= start)
        .where(AnalyticsEvent.created_at <= end)
    )
    if tool_name:
        stmt = stmt.where(AnalyticsEvent.tool_name == tool_name)
    if event_name:
        stmt = stmt.where(AnalyticsEvent.event_name == event_name)

    result = await db.execute(stmt.order_by(AnalyticsEvent.created_at.asc()))
    return list(result.scalars().all())
