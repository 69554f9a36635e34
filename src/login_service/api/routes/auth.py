"""Authentication Routes

Purpose: Credential submission and Google sign-in

Key Endpoints:
- POST /register: Local registration, signs the new user in
- POST /login: Local email/password login
- GET /auth/google: Start Google sign-in
- GET /auth/google/secrets: Google callback
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from login_service.api.cookies import (
    OAUTH_STATE_COOKIE,
    clear_oauth_state_cookie,
    set_oauth_state_cookie,
    set_session_cookie,
)
from login_service.api.deps import (
    get_app_settings,
    get_authenticator,
    get_google_client,
    get_hasher,
    get_session_manager,
    get_user_store,
)
from login_service.config.settings import Settings
from login_service.core.auth import Authenticator, SessionManager
from login_service.core.auth.google import GoogleOAuthClient
from login_service.core.auth.registration import register_local_user
from login_service.domain.errors import (
    DuplicateUser,
    InvalidCredentials,
    InvalidRegistration,
    ProviderError,
    StoreUnavailable,
)
from login_service.domain.models import AuthResult, LocalCredentials, User
from login_service.infrastructure.auth.user_store import UserStore
from login_service.security import PasswordHasher, create_oauth_state, verify_oauth_state

router = APIRouter(tags=["authentication"])
logger = logging.getLogger(__name__)


async def start_session(
    user: User, settings: Settings, session_manager: SessionManager
) -> RedirectResponse:
    """Create a session for the user and send them to the protected page"""
    session_id = await session_manager.create(user)
    response = RedirectResponse(url="/secrets", status_code=status.HTTP_302_FOUND)
    set_session_cookie(response, settings, session_id)
    return response


def redirect_to_login() -> RedirectResponse:
    return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)


def raise_if_error(result: AuthResult) -> None:
    """Surface incomplete verifications as store failures"""
    if result.is_error:
        raise StoreUnavailable("Authentication could not be completed") from result.cause


@router.post("/register")
async def register(
    username: str = Form(""),
    password: str = Form(""),
    settings: Settings = Depends(get_app_settings),
    user_store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Register a local account and sign it in"""
    try:
        user = await register_local_user(user_store, hasher, username, password)
    except InvalidRegistration as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except DuplicateUser:
        return PlainTextResponse("User already exists", status_code=status.HTTP_409_CONFLICT)

    return await start_session(user, settings, session_manager)


@router.post("/login")
async def login(
    username: str = Form(""),
    password: str = Form(""),
    settings: Settings = Depends(get_app_settings),
    authenticator: Authenticator = Depends(get_authenticator),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Local login; unknown user and wrong password look the same to the client"""
    result = await authenticator.verify(LocalCredentials(email=username, password=password))
    raise_if_error(result)

    if not result.is_success:
        raise InvalidCredentials("Invalid email or password")

    return await start_session(result.user, settings, session_manager)


@router.get("/auth/google")
async def google_login(
    settings: Settings = Depends(get_app_settings),
    google: Optional[GoogleOAuthClient] = Depends(get_google_client),
):
    """Redirect to Google's consent screen (scopes: profile, email)"""
    if google is None:
        logger.warning("Google sign-in requested but GOOGLE_CLIENT_ID/SECRET are not set")
        return redirect_to_login()

    state, state_cookie = create_oauth_state(settings.session_secret)
    response = RedirectResponse(url=google.get_login_url(state), status_code=status.HTTP_302_FOUND)
    set_oauth_state_cookie(response, settings, state_cookie)
    return response


@router.get("/auth/google/secrets")
async def google_callback(
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    google: Optional[GoogleOAuthClient] = Depends(get_google_client),
    authenticator: Authenticator = Depends(get_authenticator),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Handle Google's redirect: verify state, exchange code, find-or-create the user"""
    if google is None:
        raise ProviderError("Google sign-in is not configured")
    if error:
        raise ProviderError(f"Google returned an error: {error}")
    if not verify_oauth_state(request.cookies.get(OAUTH_STATE_COOKIE), state, settings.session_secret):
        raise ProviderError("Invalid or expired state parameter")
    if not code:
        raise ProviderError("Missing authorization code")

    identity = await google.exchange_code(code)

    result = await authenticator.verify(identity)
    raise_if_error(result)

    if not result.is_success:
        logger.warning(f"Google sign-in rejected: {result.reason}")
        response = redirect_to_login()
    else:
        response = await start_session(result.user, settings, session_manager)

    clear_oauth_state_cookie(response, settings)
    return response
