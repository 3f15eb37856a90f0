"""Photos API: next feed page, single photo, like / unlike. Feed API: photos loaded so far."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_api_client, get_api_settings, get_current_session
from app.schemas.photos import LoadedPhotosSchema, PhotoPageSchema, PhotoSchema
from app.services.images_list import ImagesListService, get_images_list_service
from app.services.photo_result import SchemaViolation
from app.services.unsplash import ApiSettings, RemoteApiError

logger = logging.getLogger(__name__)

router = APIRouter()
feed_router = APIRouter()


def get_feed(
    session: dict = Depends(get_current_session),
    settings: ApiSettings = Depends(get_api_settings),
) -> ImagesListService:
    return get_images_list_service(session["id"], session["expires_at"], per_page=settings.per_page)


def _loaded_photo(feed: ImagesListService, photo_id: str) -> PhotoSchema:
    photo = feed.get_photo(photo_id)
    if photo is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Photo not found",
        )
    return PhotoSchema.model_validate(photo)


@router.get("", response_model=PhotoPageSchema)
def fetch_next_page(
    feed: ImagesListService = Depends(get_feed),
    client: httpx.Client = Depends(get_api_client),
) -> PhotoPageSchema:
    """Load the next page of the feed and return the photos it added."""
    try:
        loaded = feed.fetch_photos_next_page(client)
    except SchemaViolation as exc:
        logger.error("Photo listing violates schema at %s: %s", exc.path, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Malformed photo listing: {exc}",
        )
    except RemoteApiError as exc:
        logger.warning("Photo listing failed: %s", exc.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Photo service unavailable",
        )

    if loaded is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Page load already in progress",
        )
    return PhotoPageSchema(
        items=[PhotoSchema.model_validate(photo) for photo in loaded.photos],
        page=loaded.page,
        total_loaded=loaded.total_loaded,
    )


@feed_router.get("", response_model=LoadedPhotosSchema)
def list_loaded_photos(feed: ImagesListService = Depends(get_feed)) -> LoadedPhotosSchema:
    """All photos loaded so far in this session, in feed order."""
    return LoadedPhotosSchema(
        items=[PhotoSchema.model_validate(photo) for photo in feed.photos],
        last_loaded_page=feed.last_loaded_page,
    )


@router.get("/{photo_id}", response_model=PhotoSchema)
def get_photo(photo_id: str, feed: ImagesListService = Depends(get_feed)) -> PhotoSchema:
    """Single photo view (full-size URL, size, description)."""
    return _loaded_photo(feed, photo_id)


def _change_like(feed: ImagesListService, client: httpx.Client, photo_id: str, is_like: bool) -> PhotoSchema:
    try:
        photo = feed.change_like(client, photo_id, is_like)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Photo not found",
        )
    except RemoteApiError as exc:
        logger.warning("Like change for %s failed: %s", photo_id, exc.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not change like",
        )
    return PhotoSchema.model_validate(photo)


@router.post("/{photo_id}/like", response_model=PhotoSchema)
def like_photo(
    photo_id: str,
    feed: ImagesListService = Depends(get_feed),
    client: httpx.Client = Depends(get_api_client),
) -> PhotoSchema:
    return _change_like(feed, client, photo_id, True)


@router.delete("/{photo_id}/like", response_model=PhotoSchema)
def unlike_photo(
    photo_id: str,
    feed: ImagesListService = Depends(get_feed),
    client: httpx.Client = Depends(get_api_client),
) -> PhotoSchema:
    return _change_like(feed, client, photo_id, False)
