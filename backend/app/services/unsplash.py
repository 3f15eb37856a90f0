"""Remote photo API client: settings, httpx client factory, JSON helpers, OAuth code exchange."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from app.services.photo_result import SchemaViolation, json_type_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiSettings:
    api_url: str
    oauth_url: str
    access_key: str
    secret_key: str
    redirect_uri: str
    per_page: int
    timeout_seconds: float


class RemoteApiError(RuntimeError):
    """Remote API answered with a non-2xx status or could not be reached (status_code=None)."""

    def __init__(self, status_code: int | None, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def load_api_settings() -> ApiSettings:
    per_page = _parse_int(os.environ.get("UNSPLASH_PER_PAGE", "10"), default=10)
    if per_page < 1:
        logger.warning("Invalid UNSPLASH_PER_PAGE value: %s. Falling back to 10.", per_page)
        per_page = 10
    return ApiSettings(
        api_url=os.environ.get("UNSPLASH_API_URL", "https://api.unsplash.com").strip().rstrip("/"),
        oauth_url=os.environ.get("UNSPLASH_OAUTH_URL", "https://unsplash.com").strip().rstrip("/"),
        access_key=os.environ.get("UNSPLASH_ACCESS_KEY", "").strip(),
        secret_key=os.environ.get("UNSPLASH_SECRET_KEY", "").strip(),
        redirect_uri=os.environ.get("UNSPLASH_REDIRECT_URI", "urn:ietf:wg:oauth:2.0:oob").strip(),
        per_page=per_page,
        timeout_seconds=float(os.environ.get("UNSPLASH_TIMEOUT_SECONDS", "15")),
    )


def build_client(
    settings: ApiSettings,
    access_token: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """httpx client bound to the API base URL; authorized with the user's bearer token when given."""
    headers = {"Accept-Version": "v1"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    elif settings.access_key:
        headers["Authorization"] = f"Client-ID {settings.access_key}"
    return httpx.Client(
        base_url=settings.api_url,
        headers=headers,
        timeout=httpx.Timeout(settings.timeout_seconds),
        transport=transport,
    )


def send_json(
    client: httpx.Client,
    method: str,
    path: str,
    params: dict[str, Any] | None = None,
    data: dict[str, Any] | None = None,
) -> Any:
    """Send a request and return the decoded JSON body (None for an empty body)."""
    try:
        response = client.request(method, path, params=params, data=data)
    except httpx.HTTPError as exc:
        raise RemoteApiError(None, f"{method} {path} failed: {exc}") from exc

    if response.is_error:
        raise RemoteApiError(
            response.status_code,
            f"{method} {path} returned {response.status_code}",
        )
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteApiError(response.status_code, f"{method} {path} returned invalid JSON") from exc


def get_json(client: httpx.Client, path: str, params: dict[str, Any] | None = None) -> Any:
    return send_json(client, "GET", path, params=params)


def exchange_code_for_token(
    settings: ApiSettings,
    code: str,
    client: httpx.Client | None = None,
) -> str:
    """Exchange an OAuth authorization code for a bearer token."""
    own_client = client is None
    if own_client:
        client = httpx.Client(base_url=settings.oauth_url, timeout=httpx.Timeout(settings.timeout_seconds))
    try:
        body = send_json(
            client,
            "POST",
            "/oauth/token",
            data={
                "client_id": settings.access_key,
                "client_secret": settings.secret_key,
                "redirect_uri": settings.redirect_uri,
                "code": code,
                "grant_type": "authorization_code",
            },
        )
    finally:
        if own_client:
            client.close()

    if not isinstance(body, dict):
        raise SchemaViolation("$", "object", json_type_name(body))
    if "access_token" not in body:
        raise SchemaViolation("access_token", "non-empty string", "missing")
    token = body["access_token"]
    if not isinstance(token, str) or not token:
        observed = "empty string" if token == "" else json_type_name(token)
        raise SchemaViolation("access_token", "non-empty string", observed)
    return token


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Invalid integer setting: %s. Falling back to %s.", value, default)
        return default
