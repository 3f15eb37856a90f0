from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.services.photo_result import SchemaViolation, json_type_name
from app.services.unsplash import get_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    username: str
    name: str
    login_name: str
    bio: str | None


def _optional_str(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    return value if isinstance(value, str) else None


def profile_from_json(body: Any) -> Profile:
    """Build a Profile from GET /me. Only `username` is required."""
    if not isinstance(body, dict):
        raise SchemaViolation("$", "object", json_type_name(body))
    username = body.get("username")
    if not isinstance(username, str) or not username:
        observed = "missing" if "username" not in body else json_type_name(username)
        raise SchemaViolation("username", "non-empty string", observed)

    parts = [_optional_str(body, "first_name"), _optional_str(body, "last_name")]
    name = " ".join(part.strip() for part in parts if part and part.strip())
    return Profile(
        username=username,
        name=name,
        login_name=f"@{username}",
        bio=_optional_str(body, "bio"),
    )


def fetch_profile(client: httpx.Client) -> Profile:
    return profile_from_json(get_json(client, "/me"))


def fetch_profile_image_url(client: httpx.Client, username: str) -> str | None:
    """profile_image.small of GET /users/{username}; None if the user has no avatar."""
    body = get_json(client, f"/users/{username}")
    if not isinstance(body, dict):
        raise SchemaViolation("$", "object", json_type_name(body))
    images = body.get("profile_image")
    if not isinstance(images, dict):
        logger.info("User %s has no profile_image", username)
        return None
    small = images.get("small")
    return small if isinstance(small, str) else None
