"""Dependency injection functions.

Components are built once by the application factory and kept on
``app.state``; these accessors hand them to route handlers.
"""

from typing import Optional

from fastapi import Request

from login_service.config.settings import Settings
from login_service.core.auth import Authenticator, SessionManager
from login_service.core.auth.google import GoogleOAuthClient
from login_service.infrastructure.auth.user_store import UserStore
from login_service.security import PasswordHasher


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_google_client(request: Request) -> Optional[GoogleOAuthClient]:
    """Google client, or None when OAuth credentials are not configured"""
    return request.app.state.google_client
