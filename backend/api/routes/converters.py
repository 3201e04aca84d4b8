from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException

from devtoolshub import timestamps
from devtoolshub.base_converter import convert_all_bases
from schemas.api import (
    BaseConvertRequest,
    BaseConvertResponse,
    DateConvertRequest,
    TimestampConvertRequest,
    TimestampConvertResponse,
    TimestampsResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _iso_utc(moment: datetime) -> str:
    # ISO 8601 with milliseconds and a trailing Z
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.post("/base", response_model=BaseConvertResponse)
async def convert_base(body: BaseConvertRequest):
    """Convert a number into every base, plus the requested target."""
    result = convert_all_bases(body.value, body.from_base)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)

    return BaseConvertResponse(
        values={base.value: value for base, value in result.values.items()},
        result=result.values[body.to_base] if body.to_base else None,
    )


@router.post("/timestamp", response_model=TimestampConvertResponse)
async def convert_timestamp(body: TimestampConvertRequest):
    validation = timestamps.validate_timestamp_input(body.value, body.unit)
    if not validation.ok:
        raise HTTPException(status_code=422, detail=validation.error)

    moment = timestamps.timestamp_to_datetime(validation.value, body.unit)
    if moment is None:
        raise HTTPException(status_code=422, detail=timestamps.TIMESTAMP_RANGE_ERROR)

    try:
        local = timestamps.format_datetime_in_timezone(moment, body.timezone)
    except (timestamps.UnknownTimezoneError, timestamps.TimestampRangeError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    stamp = timestamps.datetime_to_timestamp(moment)
    return TimestampConvertResponse(
        iso_utc=_iso_utc(moment),
        local=local,
        timezone=body.timezone,
        seconds=stamp.seconds,
        milliseconds=stamp.milliseconds,
    )


@router.post("/date", response_model=TimestampsResponse)
async def convert_date(body: DateConvertRequest):
    parsed = timestamps.parse_date_string(body.value, body.timezone)
    if not parsed.ok:
        raise HTTPException(status_code=422, detail=parsed.error)

    stamp = timestamps.datetime_to_timestamp(parsed.value)
    return TimestampsResponse(
        seconds=stamp.seconds,
        milliseconds=stamp.milliseconds,
        iso_utc=_iso_utc(parsed.value),
    )


@router.get("/timestamp/now", response_model=TimestampsResponse)
async def now():
    stamp = timestamps.current_timestamp()
    return TimestampsResponse(seconds=stamp.seconds, milliseconds=stamp.milliseconds)
