from __future__ import annotations

import asyncio
from dataclasses import asdict
from functools import partial

from fastapi import APIRouter, HTTPException

from devtoolshub.json_tools import JsonTextResult, format_json, minify_json, transform_json_string
from schemas.api import JsonFormatRequest, JsonTextResponse, JsonTransformRequest

router = APIRouter()


def _unwrap(result: JsonTextResult) -> JsonTextResponse:
    if not result.ok:
        detail: dict = {"message": result.error}
        if result.location:
            detail.update(asdict(result.location))
        raise HTTPException(status_code=422, detail=detail)
    return JsonTextResponse(text=result.text)


@router.post("/format", response_model=JsonTextResponse)
async def format_document(body: JsonFormatRequest):
    """Pretty-print or minify; parse errors report position, line and column."""
    loop = asyncio.get_running_loop()
    reformat = minify_json if body.minify else format_json
    return _unwrap(await loop.run_in_executor(None, reformat, body.source))


@router.post("/transform-keys", response_model=JsonTextResponse)
async def transform_keys(body: JsonTransformRequest):
    loop = asyncio.get_running_loop()
    return _unwrap(
        await loop.run_in_executor(None, partial(transform_json_string, body.source, body.kind))
    )
