from __future__ import annotations

import asyncio
import logging
from functools import partial

from fastapi import APIRouter, HTTPException

from config import get_settings
from devtoolshub import regex_engine
from devtoolshub.regex_engine import RegexFlags
from schemas.api import (
    EscapeResponse,
    ExplainPartResponse,
    ExplainResponse,
    MatchListResponse,
    MatchResponse,
    RegexEscapeRequest,
    RegexExplainRequest,
    RegexFlagsModel,
    RegexMatchRequest,
    RegexPresetList,
    RegexPresetResponse,
    RegexReplaceRequest,
    ReplaceResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def _flags(model: RegexFlagsModel) -> RegexFlags:
    return RegexFlags(**model.model_dump())


@router.post("/match", response_model=MatchListResponse)
async def match(body: RegexMatchRequest):
    """List every match of the pattern in the subject."""
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(
            regex_engine.get_match_results,
            body.pattern,
            _flags(body.flags),
            body.subject,
            max_input_length=settings.regex_max_input_length,
            timeout=settings.regex_timeout_seconds,
        ),
    )
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)

    return MatchListResponse(
        matches=[MatchResponse(match=m.match, index=m.index, groups=m.groups) for m in result.matches],
        count=len(result.matches),
    )


@router.post("/replace", response_model=ReplaceResponse)
async def replace(body: RegexReplaceRequest):
    if len(body.subject) > settings.regex_max_input_length:
        raise HTTPException(status_code=422, detail=regex_engine.INPUT_TOO_LONG_ERROR)

    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(
            regex_engine.replace_all,
            body.pattern,
            _flags(body.flags),
            body.subject,
            body.replacement,
            timeout=settings.regex_timeout_seconds,
        ),
    )
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return ReplaceResponse(result=result.result, replace_count=result.replace_count)


@router.post("/explain", response_model=ExplainResponse)
async def explain(body: RegexExplainRequest):
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None, regex_engine.explain_pattern, body.pattern, _flags(body.flags)
    )
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return ExplainResponse(
        parts=[
            ExplainPartResponse(type=part.type.value, raw=part.raw, description=part.description)
            for part in result.parts
        ]
    )


@router.post("/escape", response_model=EscapeResponse)
async def escape(body: RegexEscapeRequest):
    if body.unescape:
        return EscapeResponse(result=regex_engine.unescape_regex(body.text))
    return EscapeResponse(result=regex_engine.escape_for_regex(body.text))


@router.get("/presets", response_model=RegexPresetList)
async def presets():
    return RegexPresetList(
        presets=[
            RegexPresetResponse(
                id=preset.id,
                name=preset.name,
                pattern=preset.pattern,
                description=preset.description,
                flags=preset.flags.as_string(),
            )
            for preset in regex_engine.get_regex_presets()
        ]
    )
