import time

import pytest
from fastapi.testclient import TestClient

from app.services.images_list import images_list_service_count

from conftest import FakePhotoApi, make_photo


def test_photos_require_auth(client: TestClient) -> None:
    assert client.get("/api/photos").status_code == 401


def test_fetch_next_page(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.pages[1] = [make_photo("a", description="First"), make_photo("b", liked=True)]
    fake_api.pages[2] = [make_photo("c")]

    first = logged_in.get("/api/photos")
    assert first.status_code == 200
    body = first.json()
    assert body["page"] == 1
    assert body["total_loaded"] == 2
    assert [item["id"] for item in body["items"]] == ["a", "b"]
    item = body["items"][0]
    assert item["size"] == {"width": 1200, "height": 800}
    assert item["welcome_description"] == "First"
    assert item["large_image_url"] == "https://img.test/a/full.jpg"
    assert item["is_liked"] is False
    assert body["items"][1]["welcome_description"] is None

    second = logged_in.get("/api/photos").json()
    assert second["page"] == 2
    assert [item["id"] for item in second["items"]] == ["c"]
    assert second["total_loaded"] == 3

    photos_request = [r for r in fake_api.requests if r.url.path == "/photos"][-1]
    assert photos_request.url.params["per_page"] == "2"
    assert photos_request.headers["authorization"] == "Bearer token-1"


def test_malformed_listing_returns_502_naming_field(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    bad = make_photo("a")
    bad["width"] = "wide"
    fake_api.pages[1] = [bad]
    response = logged_in.get("/api/photos")
    assert response.status_code == 502
    assert "width" in response.json()["detail"]

    # page counter did not advance
    fake_api.pages[1] = [make_photo("a")]
    assert logged_in.get("/api/photos").json()["page"] == 1


def test_remote_failure_returns_502(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.fail_status = 500
    assert logged_in.get("/api/photos").status_code == 502


def test_loaded_photos_and_single_photo(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.pages[1] = [make_photo("a"), make_photo("b")]
    logged_in.get("/api/photos")

    loaded = logged_in.get("/api/feed").json()
    assert [item["id"] for item in loaded["items"]] == ["a", "b"]
    assert loaded["last_loaded_page"] == 1

    single = logged_in.get("/api/photos/b")
    assert single.status_code == 200
    assert single.json()["large_image_url"] == "https://img.test/b/full.jpg"

    assert logged_in.get("/api/photos/zzz").status_code == 404


def test_like_and_unlike(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.pages[1] = [make_photo("a")]
    logged_in.get("/api/photos")

    liked = logged_in.post("/api/photos/a/like")
    assert liked.status_code == 200
    assert liked.json()["is_liked"] is True
    assert logged_in.get("/api/photos/a").json()["is_liked"] is True

    unliked = logged_in.delete("/api/photos/a/like")
    assert unliked.json()["is_liked"] is False


def test_like_unknown_photo(logged_in: TestClient) -> None:
    assert logged_in.post("/api/photos/nope/like").status_code == 404


def test_feed_is_reset_by_logout(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.pages[1] = [make_photo("a")]
    logged_in.get("/api/photos")
    logged_in.post("/api/auth/logout")

    logged_in.post("/api/auth/login", json={"code": "good-code"})
    loaded = logged_in.get("/api/feed").json()
    assert loaded["items"] == []
    assert loaded["last_loaded_page"] is None


def test_profile(logged_in: TestClient) -> None:
    response = logged_in.get("/api/profile")
    assert response.status_code == 200
    body = response.json()
    assert body["profile"] == {
        "username": "ekaterina_nov",
        "name": "Ekaterina Novikova",
        "login_name": "@ekaterina_nov",
        "bio": None,
    }
    assert body["avatar_url"] == "https://img.test/avatar.jpg"


def test_profile_without_avatar(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.avatar = None
    assert logged_in.get("/api/profile").json()["avatar_url"] is None


def test_profile_remote_failure(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.fail_status = 503
    assert logged_in.get("/api/profile").status_code == 502


def test_health_is_public(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_photo_with_reserved_looking_id(logged_in: TestClient, fake_api: FakePhotoApi) -> None:
    fake_api.pages[1] = [make_photo("loaded"), make_photo("feed")]
    logged_in.get("/api/photos")

    for photo_id in ("loaded", "feed"):
        response = logged_in.get(f"/api/photos/{photo_id}")
        assert response.status_code == 200
        assert response.json()["id"] == photo_id


def test_feed_of_expired_session_is_evicted(
    logged_in: TestClient, fake_api: FakePhotoApi, monkeypatch: pytest.MonkeyPatch
) -> None:
    fake_api.pages[1] = [make_photo("a")]
    assert logged_in.get("/api/photos").status_code == 200
    assert images_list_service_count() >= 1

    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 7200)
    assert logged_in.get("/api/photos").status_code == 401
    assert images_list_service_count() == 0
