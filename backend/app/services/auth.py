from __future__ import annotations

import logging
import sqlite3

import httpx

from app.auth.session import create_session_token, load_session_settings
from app.db.token_storage import remove_token, store_token
from app.services.images_list import drop_images_list_service
from app.services.unsplash import ApiSettings, exchange_code_for_token

logger = logging.getLogger(__name__)


def open_session(
    db: sqlite3.Connection,
    settings: ApiSettings,
    code: str,
    oauth_client: httpx.Client | None = None,
) -> str:
    """Exchange the authorization code and persist the token. Returns the new session id."""
    access_token = exchange_code_for_token(settings, code, client=oauth_client)
    session_id = store_token(db, access_token)
    logger.info("Opened session %s", session_id)
    return session_id


def create_session_cookie_value(session_id: str) -> str:
    """Signed cookie value for the session."""
    settings = load_session_settings()
    return create_session_token(
        session_id=session_id,
        secret_key=settings.secret_key,
        ttl_seconds=settings.cookie_max_age_seconds,
    )


def close_session(db: sqlite3.Connection, session_id: str) -> None:
    """Remove the stored token and forget the session's feed state."""
    if not remove_token(db, session_id):
        logger.info("Session %s had no stored token", session_id)
    drop_images_list_service(session_id)
