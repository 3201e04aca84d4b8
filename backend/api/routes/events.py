from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_admin
from db.database import get_db
from schemas.api import AnalyticsSummaryResponse, EventsStoredResponse
from services import analytics_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=EventsStoredResponse, status_code=201)
async def collect_events(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Store a batch of anonymous usage events.

    Accepts a list, ``{"events": [...]}`` or a single event object.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    stored = await analytics_service.ingest_events(db, body)
    return EventsStoredResponse(stored=stored)


@router.get(
    "/summary",
    response_model=AnalyticsSummaryResponse,
    dependencies=[Depends(require_admin)],
)
async def events_summary(
    preset: str | None = Query(None, alias="range"),
    start: str | None = None,
    end: str | None = None,
    tool_name: str | None = None,
    event_name: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Daily event counts for the admin dashboard."""
    return await analytics_service.get_summary(
        db,
        preset=preset,
        start=start,
        end=end,
        tool_name=tool_name or None,
        event_name=event_name or None,
    )
