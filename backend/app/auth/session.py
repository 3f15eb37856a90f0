"""
Signed session cookie: "<base64url(json payload)>.<base64url(hmac-sha256)>".

The payload only carries the session id ("sid"); the OAuth token it refers to
stays in the oauth_tokens table.
"""

from __future__ import annotations

import base64
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from hashlib import sha256
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSessionSettings:
    secret_key: str
    cookie_name: str
    cookie_secure: bool
    cookie_samesite: str
    cookie_max_age_seconds: int


class SessionTokenError(ValueError):
    """Cookie value is malformed, tampered with or expired."""


def load_session_settings() -> AuthSessionSettings:
    secret = os.environ.get("AUTH_SECRET_KEY", "").strip()
    cookie_name = os.environ.get("AUTH_COOKIE_NAME", "imagefeed_session").strip() or "imagefeed_session"
    cookie_secure = _parse_bool(os.environ.get("AUTH_COOKIE_SECURE", "true"))
    cookie_samesite = os.environ.get("AUTH_COOKIE_SAMESITE", "lax").strip().lower() or "lax"
    max_age = os.environ.get("AUTH_COOKIE_MAX_AGE_SECONDS", "86400")
    if cookie_samesite not in {"lax", "strict", "none"}:
        logger.warning("Invalid AUTH_COOKIE_SAMESITE value: %s. Falling back to 'lax'.", cookie_samesite)
        cookie_samesite = "lax"
    return AuthSessionSettings(
        secret_key=secret,
        cookie_name=cookie_name,
        cookie_secure=cookie_secure,
        cookie_samesite=cookie_samesite,
        cookie_max_age_seconds=int(max_age),
    )


def create_session_token(*, session_id: str, secret_key: str, ttl_seconds: int) -> str:
    if not secret_key:
        raise RuntimeError("AUTH_SECRET_KEY is required for session cookies")
    issued_at = int(time.time())
    payload = {"sid": session_id, "iat": issued_at, "exp": issued_at + ttl_seconds}
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    return f"{payload_b64}.{_sign(payload_b64, secret_key)}"


def verify_session_token(token: str, secret_key: str) -> dict[str, Any]:
    """Return the payload of a valid token; SessionTokenError otherwise."""
    if not secret_key:
        raise RuntimeError("AUTH_SECRET_KEY is required for session cookies")
    payload_b64, sep, signature = token.partition(".")
    if not sep or not payload_b64 or not payload_b64.isascii():
        raise SessionTokenError("Invalid token format")
    # compare_digest rejects non-ASCII str, so compare the encoded bytes
    expected = _sign(payload_b64, secret_key).encode("utf-8")
    if not hmac.compare_digest(signature.encode("utf-8", "replace"), expected):
        raise SessionTokenError("Invalid token signature")

    try:
        payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as exc:
        raise SessionTokenError("Invalid token payload") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("sid"), str):
        raise SessionTokenError("Invalid token payload")
    if int(payload.get("exp", 0)) <= int(time.time()):
        raise SessionTokenError("Token expired")
    return payload


def _sign(payload_b64: str, secret_key: str) -> str:
    digest = hmac.new(secret_key.encode("utf-8"), payload_b64.encode("utf-8"), sha256).digest()
    return _b64url_encode(digest)


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("utf-8").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}
