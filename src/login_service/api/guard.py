"""Route guard for protected pages.

Unauthenticated requests are sent to the login page; there is no
401/403 distinction.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from login_service.api.cookies import session_id_from
from login_service.api.deps import get_app_settings, get_session_manager
from login_service.config.settings import Settings
from login_service.core.auth import SessionManager
from login_service.domain.errors import LoginRequired
from login_service.domain.models import User

logger = logging.getLogger(__name__)


async def get_current_user_optional(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    session_manager: SessionManager = Depends(get_session_manager),
) -> Optional[User]:
    """Get current user from the session cookie (None if anonymous)"""
    return await session_manager.resolve(session_id_from(request, settings))


async def is_authenticated(request: Request) -> bool:
    """True iff the request's session resolves to a user."""
    state = request.app.state
    user = await state.session_manager.resolve(session_id_from(request, state.settings))
    return user is not None


async def require_user(
    request: Request,
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Require authenticated user (redirects to /login otherwise)"""
    if not user:
        logger.info(f"Authentication required for {request.url.path}; redirecting to login")
        raise LoginRequired("Please log in to access this page.")
    return user
