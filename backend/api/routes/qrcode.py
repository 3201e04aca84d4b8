from __future__ import annotations

from fastapi import APIRouter, HTTPException

from devtoolshub import qr_content
from schemas.api import QRContentRequest, QRContentResponse

router = APIRouter()

_CONTENT_TYPES = {
    "text": qr_content.TextContent,
    "wifi": qr_content.WifiContent,
    "vcard": qr_content.VCardContent,
    "email": qr_content.EmailContent,
    "phone": qr_content.PhoneContent,
    "sms": qr_content.SmsContent,
}


@router.post("/content", response_model=QRContentResponse)
async def content(body: QRContentRequest):
    """Build the string to encode in a QR code. Rendering happens client side."""
    payload = body.root
    config = _CONTENT_TYPES[payload.type](**payload.model_dump(exclude={"type"}))
    result = qr_content.format_qr_content(config)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return QRContentResponse(content=result.content)
