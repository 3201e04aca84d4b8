from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from limits.storage import Storage, storage_from_string

from config import get_settings
from devtoolshub.admin_auth import (
    ADMIN_SESSION_COOKIE,
    LoginRateLimiter,
    SessionSigner,
    client_identifier,
)

settings = get_settings()


@lru_cache
def get_rate_limit_store() -> Storage:
    return storage_from_string(settings.rate_limit_storage_uri)


def get_login_rate_limiter(
    store: Storage = Depends(get_rate_limit_store),
) -> LoginRateLimiter:
    return LoginRateLimiter(store, settings.login_rate_limit)


@lru_cache
def get_session_signer() -> SessionSigner:
    return SessionSigner(
        settings.admin_session_secret,
        ttl_seconds=settings.admin_session_ttl_seconds,
    )


def get_client_id(request: Request) -> str:
    return client_identifier(
        request.headers.get("x-forwarded-for"),
        request.headers.get("x-real-ip"),
        request.headers.get("user-agent"),
    )


def is_admin_request(
    request: Request,
    signer: SessionSigner = Depends(get_session_signer),
) -> bool:
    return signer.verify(request.cookies.get(ADMIN_SESSION_COOKIE))


def require_admin(authenticated: bool = Depends(is_admin_request)) -> None:
    if not authenticated:
        raise HTTPException(status_code=401, detail="Admin session required")
