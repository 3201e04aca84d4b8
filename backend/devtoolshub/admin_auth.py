"""Admin login primitives: password check, signed session tokens, rate limiting.

Session tokens are ``<expiry>.<hex hmac>`` where the HMAC-SHA256 covers the
expiry timestamp. Nothing is stored server side, so restarting with a
different secret invalidates every open session.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import constant_time, hashes, hmac
from limits import RateLimitItem, parse
from limits.storage import Storage
from limits.strategies import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

ADMIN_SESSION_COOKIE = "dth_admin_session"
SESSION_TTL_SECONDS = 60 * 60
MAX_PASSWORD_LENGTH = 256

UNKNOWN_IP = "unknown-ip"
UNKNOWN_USER_AGENT = "unknown-ua"


def is_admin_password_valid(password: str, expected: str) -> bool:
    """Constant-time comparison; an unconfigured password never matches."""
    if not expected or not password:
        return False
    return constant_time.bytes_eq(password.encode("utf-8"), expected.encode("utf-8"))


def client_identifier(
    forwarded_for: str | None,
    real_ip: str | None,
    user_agent: str | None,
) -> str:
    """Rate-limit key from the first forwarded address plus the user agent."""
    raw_ip = forwarded_for or real_ip or ""
    ip = raw_ip.split(",")[0].strip() or UNKNOWN_IP
    return f"{ip}|{user_agent or UNKNOWN_USER_AGENT}"


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


class SessionSigner:
    def __init__(self, secret: bytes | str | None = None, ttl_seconds: int = SESSION_TTL_SECONDS):
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not secret:
            # Sessions then only survive as long as this process
            secret = os.urandom(32)
        self._key = secret
        self.ttl_seconds = ttl_seconds

    def _signature(self, payload: bytes) -> bytes:
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(payload)
        return h.finalize()

    def issue(self, now: float | None = None) -> str:
        expires_at = int((now if now is not None else time.time()) + self.ttl_seconds)
        payload = str(expires_at).encode("ascii")
        return f"{expires_at}.{self._signature(payload).hex()}"

    def verify(self, token: str | None, now: float | None = None) -> bool:
        if not token or "." not in token:
            return False
        expiry, _, signature = token.partition(".")
        if not expiry.isdigit():
            return False
        try:
            expected = bytes.fromhex(signature)
        except ValueError:
            return False

        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(expiry.encode("ascii"))
        try:
            h.verify(expected)
        except InvalidSignature:
            return False

        current = now if now is not None else time.time()
        return int(expiry) > current


# ---------------------------------------------------------------------------
# Login rate limiting
# ---------------------------------------------------------------------------

LOGIN_RATE_LIMIT = "10 per 5 minutes"
LOGIN_NAMESPACE = "admin-login"


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float


class LoginRateLimiter:
    """Fixed-window attempt counter keyed by client identifier.

    Counting and expiry live in a ``limits`` storage backend, so the same
    limiter works against ``memory://`` or a shared store like Redis.
    """

    def __init__(self, storage: Storage, limit: str | RateLimitItem = LOGIN_RATE_LIMIT):
        self.limit = parse(limit) if isinstance(limit, str) else limit
        self._strategy = FixedWindowRateLimiter(storage)

    def check_and_increase(self, key: str) -> RateLimitDecision:
        allowed = self._strategy.hit(self.limit, LOGIN_NAMESPACE, key)
        stats = self._strategy.get_window_stats(self.limit, LOGIN_NAMESPACE, key)
        if not allowed:
            logger.warning("Login rate limit reached for %s", key)
        return RateLimitDecision(allowed, stats.remaining, stats.reset_time)
