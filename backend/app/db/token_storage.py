"""OAuth bearer tokens kept server-side, keyed by session id (table oauth_tokens)."""

from __future__ import annotations

import secrets
import sqlite3


def store_token(db: sqlite3.Connection, access_token: str) -> str:
    """Persist a token under a fresh session id and return the id."""
    session_id = secrets.token_urlsafe(16)
    db.execute(
        "insert into oauth_tokens (session_id, access_token, created_at) values (?, ?, datetime('now'))",
        (session_id, access_token),
    )
    db.commit()
    return session_id


def get_token(db: sqlite3.Connection, session_id: str) -> str | None:
    row = db.execute(
        "select access_token from oauth_tokens where session_id = ?",
        (session_id,),
    ).fetchone()
    if not row:
        return None
    return row["access_token"]


def remove_token(db: sqlite3.Connection, session_id: str) -> bool:
    cursor = db.execute("delete from oauth_tokens where session_id = ?", (session_id,))
    db.commit()
    return cursor.rowcount > 0
