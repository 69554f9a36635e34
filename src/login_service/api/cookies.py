"""Session and OAuth state cookie helpers."""

from typing import Optional

from fastapi import Request
from fastapi.responses import Response

from login_service.config.settings import Settings
from login_service.security import OAUTH_STATE_TTL_SECONDS, sign_session_id, unsign_session_id

OAUTH_STATE_COOKIE = "oauth_state"


def session_id_from(request: Request, settings: Settings) -> Optional[str]:
    """Session id carried by the request's signed cookie, if any."""
    return unsign_session_id(
        request.cookies.get(settings.session_cookie_name), settings.session_secret
    )


def set_session_cookie(response: Response, settings: Settings, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(session_id, settings.session_secret),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="lax",
    )


def set_oauth_state_cookie(response: Response, settings: Settings, value: str) -> None:
    # Lax still sends the cookie on the top-level redirect back from Google
    response.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=value,
        max_age=OAUTH_STATE_TTL_SECONDS,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/auth/google",
    )


def clear_oauth_state_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=OAUTH_STATE_COOKIE,
        path="/auth/google",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="lax",
    )
