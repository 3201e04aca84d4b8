from __future__ import annotations

from fastapi import APIRouter, HTTPException

from devtoolshub import encoding
from schemas.api import DecodeResponse, EncodeResponse, EncodingRequest

router = APIRouter()


@router.post("/encode", response_model=EncodeResponse)
async def encode(body: EncodingRequest):
    result = encoding.encode(body.kind, body.text)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return EncodeResponse(value=result.value)


@router.post("/decode", response_model=DecodeResponse)
async def decode(body: EncodingRequest):
    """Decode text; ``query_string`` and ``jwt`` return objects."""
    result = encoding.decode(body.kind, body.text)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return DecodeResponse(value=result.value)
