"""Shared FastAPI dependencies: current session, stored OAuth token, remote API clients."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator

import httpx
from fastapi import Depends, HTTPException, Request, status

from app.db.connection import get_db
from app.db.token_storage import get_token
from app.services.unsplash import ApiSettings, build_client, load_api_settings


def get_current_session(request: Request) -> dict:
    """Return current session (id, expires_at) from request.state (set by auth middleware)."""
    session = getattr(request.state, "session", None)
    if not session or not session.get("id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return session


def get_current_session_id(session: dict = Depends(get_current_session)) -> str:
    return session["id"]


def get_api_settings() -> ApiSettings:
    return load_api_settings()


def get_access_token(
    session_id: str = Depends(get_current_session_id),
    db: sqlite3.Connection = Depends(get_db),
) -> str:
    token = get_token(db, session_id)
    if not token:
        # Cookie is still signed but the token was removed (logged out elsewhere).
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has been closed",
        )
    return token


def get_api_client(
    access_token: str = Depends(get_access_token),
    settings: ApiSettings = Depends(get_api_settings),
) -> Generator[httpx.Client, None, None]:
    client = build_client(settings, access_token=access_token)
    try:
        yield client
    finally:
        client.close()


def get_oauth_client(
    settings: ApiSettings = Depends(get_api_settings),
) -> Generator[httpx.Client, None, None]:
    client = httpx.Client(base_url=settings.oauth_url, timeout=httpx.Timeout(settings.timeout_seconds))
    try:
        yield client
    finally:
        client.close()
