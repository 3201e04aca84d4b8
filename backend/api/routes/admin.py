from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from api.dependencies import (
    get_client_id,
    get_login_rate_limiter,
    get_session_signer,
    is_admin_request,
)
from config import get_settings
from devtoolshub.admin_auth import (
    ADMIN_SESSION_COOKIE,
    MAX_PASSWORD_LENGTH,
    LoginRateLimiter,
    SessionSigner,
    is_admin_password_valid,
)
from schemas.api import AdminLoginResponse, AdminSessionResponse

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def _set_session_cookie(response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        ADMIN_SESSION_COOKIE,
        token,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=settings.admin_cookie_secure,
        path="/",
    )


@router.post("/login", response_model=AdminLoginResponse)
async def login(
    request: Request,
    response: Response,
    client_id: str = Depends(get_client_id),
    limiter: LoginRateLimiter = Depends(get_login_rate_limiter),
    signer: SessionSigner = Depends(get_session_signer),
):
    """Exchange the dashboard password for a signed session cookie.

    Attempts are throttled per client before the body is even read.
    """
    decision = limiter.check_and_increase(client_id)
    if not decision.allowed:
        retry_after = datetime.fromtimestamp(decision.reset_at, tz=timezone.utc)
        return JSONResponse(
            status_code=429,
            content={
                "error": "Too many login attempts, please try again later.",
                "retry_after": retry_after.isoformat(),
            },
        )

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str):
        raise HTTPException(status_code=400, detail="Invalid request payload")

    # Over-long input is truncated, never rejected
    password = password.strip()[:MAX_PASSWORD_LENGTH]
    if not is_admin_password_valid(password, settings.admin_dashboard_password):
        logger.warning("Rejected admin login from %s (%d attempts left)", client_id, decision.remaining)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    _set_session_cookie(response, signer.issue(), signer.ttl_seconds)
    logger.info("Admin login succeeded for %s", client_id)
    return AdminLoginResponse(success=True)


@router.get("/session", response_model=AdminSessionResponse)
async def session_status(authenticated: bool = Depends(is_admin_request)):
    if not authenticated:
        return JSONResponse(status_code=401, content={"authenticated": False})
    return AdminSessionResponse(authenticated=True)


@router.post("/logout", response_model=AdminLoginResponse)
async def logout(response: Response):
    response.delete_cookie(
        ADMIN_SESSION_COOKIE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.admin_cookie_secure,
    )
    return AdminLoginResponse(success=True)
