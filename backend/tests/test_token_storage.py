import sqlite3
from pathlib import Path

import pytest

from app.db.token_storage import get_token, remove_token, store_token

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


@pytest.fixture()
def db():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
        conn.executescript(path.read_text(encoding="utf-8"))
    yield conn
    conn.close()


def test_store_and_get_token(db: sqlite3.Connection) -> None:
    session_id = store_token(db, "token-1")
    assert session_id
    assert get_token(db, session_id) == "token-1"


def test_each_store_gets_its_own_session(db: sqlite3.Connection) -> None:
    assert store_token(db, "token-1") != store_token(db, "token-1")


def test_remove_token(db: sqlite3.Connection) -> None:
    session_id = store_token(db, "token-1")
    assert remove_token(db, session_id) is True
    assert get_token(db, session_id) is None
    assert remove_token(db, session_id) is False
