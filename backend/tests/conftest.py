import os
import sqlite3
from pathlib import Path

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from app.api.dependencies import get_access_token, get_api_client, get_oauth_client
from app.db.connection import get_db
from main import app

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def make_photo(photo_id: str, liked: bool = False, description: str | None = None) -> dict:
    return {
        "id": photo_id,
        "width": 1200,
        "height": 800,
        "created_at": "2023-01-01T00:00:00Z",
        "description": description,
        "liked_by_user": liked,
        "urls": {"thumb": f"https://img.test/{photo_id}/thumb.jpg", "full": f"https://img.test/{photo_id}/full.jpg"},
    }


class FakePhotoApi:
    """In-process stand-in for the remote photo API (served through httpx.MockTransport)."""

    def __init__(self):
        self.pages: dict[int, object] = {}
        self.profile: dict = {"username": "ekaterina_nov", "first_name": "Ekaterina", "last_name": "Novikova"}
        self.avatar: dict | None = {"small": "https://img.test/avatar.jpg"}
        self.fail_status: int | None = None
        self.tokens: dict[str, str] = {"good-code": "token-1"}
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/oauth/token":
            code = dict(httpx.QueryParams(request.content.decode()))["code"]
            if code not in self.tokens:
                return httpx.Response(401, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": self.tokens[code], "token_type": "Bearer"})
        if self.fail_status is not None:
            return httpx.Response(self.fail_status)
        if path == "/photos":
            return httpx.Response(200, json=self.pages.get(int(request.url.params["page"]), []))
        if path.startswith("/photos/") and path.endswith("/like"):
            photo_id = path.split("/")[2]
            return httpx.Response(200, json={"photo": {"id": photo_id, "liked_by_user": request.method == "POST"}})
        if path == "/me":
            return httpx.Response(200, json=self.profile)
        if path.startswith("/users/"):
            body = {"username": path.split("/")[2]}
            if self.avatar is not None:
                body["profile_image"] = self.avatar
            return httpx.Response(200, json=body)
        return httpx.Response(404)


@pytest.fixture()
def fake_api() -> FakePhotoApi:
    return FakePhotoApi()


@pytest.fixture()
def client(fake_api: FakePhotoApi):
    os.environ["AUTH_SECRET_KEY"] = "test-secret"
    os.environ["AUTH_COOKIE_NAME"] = "imagefeed_session"
    os.environ["AUTH_COOKIE_SECURE"] = "false"
    os.environ["AUTH_COOKIE_SAMESITE"] = "lax"
    os.environ["AUTH_COOKIE_MAX_AGE_SECONDS"] = "3600"
    os.environ["UNSPLASH_PER_PAGE"] = "2"

    # check_same_thread=False: TestClient runs requests in another thread.
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.row_factory = sqlite3.Row
    for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
        conn.executescript(path.read_text(encoding="utf-8"))

    transport = httpx.MockTransport(fake_api.handle)

    def _override_get_db():
        yield conn

    def _override_oauth_client():
        with httpx.Client(base_url="https://oauth.test", transport=transport) as http:
            yield http

    def _override_api_client(access_token: str = Depends(get_access_token)):
        headers = {"Authorization": f"Bearer {access_token}"}
        with httpx.Client(base_url="https://api.test", headers=headers, transport=transport) as http:
            yield http

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_oauth_client] = _override_oauth_client
    app.dependency_overrides[get_api_client] = _override_api_client
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()
        conn.close()


@pytest.fixture()
def logged_in(client: TestClient) -> TestClient:
    response = client.post("/api/auth/login", json={"code": "good-code"})
    assert response.status_code == 200
    return client
