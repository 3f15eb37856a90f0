import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_api_client
from app.schemas.profile import ProfileResponseSchema, ProfileSchema
from app.services.photo_result import SchemaViolation
from app.services.profile import fetch_profile, fetch_profile_image_url
from app.services.unsplash import RemoteApiError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ProfileResponseSchema)
def get_profile(client: httpx.Client = Depends(get_api_client)) -> ProfileResponseSchema:
    """
    Profile of the authorized user plus avatar URL.
    A failed avatar lookup does not fail the profile; avatar_url is null then.
    """
    try:
        profile = fetch_profile(client)
    except (RemoteApiError, SchemaViolation) as exc:
        logger.warning("Profile fetch failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not load profile",
        )

    try:
        avatar_url = fetch_profile_image_url(client, profile.username)
    except (RemoteApiError, SchemaViolation) as exc:
        logger.warning("Avatar fetch for %s failed: %s", profile.username, exc)
        avatar_url = None

    return ProfileResponseSchema(profile=ProfileSchema.model_validate(profile), avatar_url=avatar_url)
