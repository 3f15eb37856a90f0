import logging
import sqlite3

import httpx
from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.dependencies import get_api_settings, get_current_session_id, get_oauth_client
from app.auth.session import load_session_settings
from app.db.connection import get_db
from app.schemas.auth import AuthLoginCommandSchema, AuthLoginResponseSchema, AuthSessionSchema
from app.services.auth import close_session, create_session_cookie_value, open_session
from app.services.photo_result import SchemaViolation
from app.services.unsplash import ApiSettings, RemoteApiError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=AuthLoginResponseSchema,
    status_code=status.HTTP_200_OK,
)
def login(
    payload: AuthLoginCommandSchema,
    response: Response,
    db: sqlite3.Connection = Depends(get_db),
    settings: ApiSettings = Depends(get_api_settings),
    oauth_client: httpx.Client = Depends(get_oauth_client),
) -> AuthLoginResponseSchema:
    """
    Exchange an OAuth authorization code for a token.
    The token stays server-side; the client gets a signed session cookie.
    """
    try:
        session_id = open_session(db, settings, payload.code, oauth_client=oauth_client)
    except RemoteApiError as exc:
        logger.warning("Token exchange failed: %s", exc.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Authorization server rejected the code",
        )
    except SchemaViolation as exc:
        logger.warning("Unexpected token response: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Invalid token response: {exc}",
        )
    except Exception:
        logger.exception("Login failed while storing token.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    try:
        cookie_settings = load_session_settings()
        response.set_cookie(
            key=cookie_settings.cookie_name,
            value=create_session_cookie_value(session_id),
            httponly=True,
            secure=cookie_settings.cookie_secure,
            samesite=cookie_settings.cookie_samesite,
            max_age=cookie_settings.cookie_max_age_seconds,
            path="/",
        )
    except Exception:
        logger.exception("Login failed while creating session cookie.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    return AuthLoginResponseSchema(session=AuthSessionSchema(id=session_id))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    response: Response,
    session_id: str = Depends(get_current_session_id),
    db: sqlite3.Connection = Depends(get_db),
) -> Response:
    """Remove the stored token, drop the feed state and clear the session cookie."""
    try:
        close_session(db, session_id)
    except Exception:
        logger.exception("Logout failed while removing token.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    settings = load_session_settings()
    response.delete_cookie(key=settings.cookie_name, path="/")
    response.status_code = status.HTTP_204_NO_CONTENT
    return response


@router.get("/me", status_code=status.HTTP_200_OK)
def me(session_id: str = Depends(get_current_session_id)) -> dict[str, AuthSessionSchema]:
    """Return the current session from request state."""
    return {"session": AuthSessionSchema(id=session_id)}
