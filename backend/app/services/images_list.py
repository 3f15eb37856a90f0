"""
Feed state per session: paged photo loading, in-flight de-duplication, likes.

A PhotoResult is projected into a Photo for display; created_at is parsed here
(the decoder keeps it as the raw string).
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from datetime import datetime

import httpx

from app.services.photo_result import PhotoResult, decode_photo_results
from app.services.unsplash import get_json, send_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoSize:
    width: int
    height: int


@dataclass(frozen=True)
class Photo:
    id: str
    size: PhotoSize
    created_at: datetime | None
    welcome_description: str | None
    thumb_image_url: str
    large_image_url: str
    is_liked: bool


@dataclass(frozen=True)
class PageLoad:
    """Result of one page load, captured while the feed was locked."""

    page: int
    photos: list[Photo]
    total_loaded: int


def parse_created_at(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp ("Z" suffix accepted); None when unparsable."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Unparsable created_at value: %s", value)
        return None


def photo_from_result(result: PhotoResult) -> Photo:
    return Photo(
        id=result.id,
        size=PhotoSize(width=result.width, height=result.height),
        created_at=parse_created_at(result.created_at),
        welcome_description=result.description,
        thumb_image_url=result.urls.thumb,
        large_image_url=result.urls.full,
        is_liked=result.liked_by_user,
    )


class ImagesListService:
    def __init__(self, per_page: int = 10):
        self.per_page = per_page
        self.photos: list[Photo] = []
        self.last_loaded_page: int | None = None
        self._fetch_lock = threading.Lock()
        self._state_lock = threading.Lock()

    def fetch_photos_next_page(self, client: httpx.Client) -> PageLoad | None:
        """
        Load the next page and append it to `photos`.
        Returns the page number with the newly appended photos, or None if a load is already in flight.
        SchemaViolation / RemoteApiError propagate and leave the page counter unchanged.
        """
        if not self._fetch_lock.acquire(blocking=False):
            logger.info("Page load already in flight, skipping.")
            return None
        try:
            next_page = (self.last_loaded_page or 0) + 1
            body = get_json(client, "/photos", params={"page": next_page, "per_page": self.per_page})
            results = decode_photo_results(body)
            new_photos = [photo_from_result(result) for result in results]

            with self._state_lock:
                known = {photo.id for photo in self.photos}
                appended = []
                for photo in new_photos:
                    if photo.id in known:
                        continue
                    known.add(photo.id)
                    appended.append(photo)
                self.photos.extend(appended)
                self.last_loaded_page = next_page
                total_loaded = len(self.photos)
            logger.info("Loaded page %s: %s new photos", next_page, len(appended))
            return PageLoad(page=next_page, photos=appended, total_loaded=total_loaded)
        finally:
            self._fetch_lock.release()

    def get_photo(self, photo_id: str) -> Photo | None:
        with self._state_lock:
            for photo in self.photos:
                if photo.id == photo_id:
                    return photo
        return None

    def change_like(self, client: httpx.Client, photo_id: str, is_like: bool) -> Photo:
        """Like (POST) or unlike (DELETE) a loaded photo. Unknown id -> KeyError."""
        if self.get_photo(photo_id) is None:
            raise KeyError(photo_id)

        body = send_json(client, "POST" if is_like else "DELETE", f"/photos/{photo_id}/like")
        is_liked = is_like
        # The like endpoint answers {"photo": {...}}; its flag wins when present.
        if isinstance(body, dict) and isinstance(body.get("photo"), dict):
            liked = body["photo"].get("liked_by_user")
            if isinstance(liked, bool):
                is_liked = liked

        with self._state_lock:
            for index, photo in enumerate(self.photos):
                if photo.id == photo_id:
                    updated = replace(photo, is_liked=is_liked)
                    self.photos[index] = updated
                    return updated
        raise KeyError(photo_id)

    def reset(self) -> None:
        with self._state_lock:
            self.photos = []
            self.last_loaded_page = None


# session id -> (feed, unix time at which the session cookie expires)
_services: dict[str, tuple[ImagesListService, float]] = {}
_services_lock = threading.Lock()


def evict_expired_images_list_services(now: float | None = None) -> int:
    """Drop feeds whose session has expired. Returns how many were dropped."""
    now = time.time() if now is None else now
    with _services_lock:
        expired = [session_id for session_id, (_, expires_at) in _services.items() if expires_at <= now]
        dropped = [_services.pop(session_id)[0] for session_id in expired]
    for service in dropped:
        service.reset()
    if dropped:
        logger.info("Evicted %s feeds of expired sessions", len(dropped))
    return len(dropped)


def get_images_list_service(session_id: str, expires_at: float, per_page: int = 10) -> ImagesListService:
    evict_expired_images_list_services()
    with _services_lock:
        entry = _services.get(session_id)
        service = entry[0] if entry is not None else ImagesListService(per_page=per_page)
        _services[session_id] = (service, expires_at)
        return service


def drop_images_list_service(session_id: str) -> None:
    with _services_lock:
        entry = _services.pop(session_id, None)
    if entry is not None:
        entry[0].reset()


def images_list_service_count() -> int:
    with _services_lock:
        return len(_services)
