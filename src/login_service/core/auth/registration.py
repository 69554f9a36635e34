"""Local account registration."""

import asyncio
import logging

from login_service.domain.errors import DuplicateUser, InvalidRegistration
from login_service.domain.models import User, normalize_email
from login_service.infrastructure.auth.user_store import UserStore
from login_service.security import MAX_PASSWORD_BYTES, PasswordHasher

logger = logging.getLogger(__name__)


def validate_registration(email: str, password: str) -> str:
    """Check registration input and return the canonical email.

    Raises:
        InvalidRegistration: If the email or password is unusable
    """
    email = normalize_email(email)
    if not email or "@" not in email:
        raise InvalidRegistration("A valid email address is required")
    if not password:
        raise InvalidRegistration("Password is required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidRegistration(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return email


async def register_local_user(
    user_store: UserStore, hasher: PasswordHasher, email: str, password: str
) -> User:
    """Create a password-based account.

    Args:
        user_store: Credential store adapter
        hasher: Password hasher
        email: Requested email (canonicalized)
        password: Plain text password

    Returns:
        The created user

    Raises:
        InvalidRegistration: If input validation fails
        DuplicateUser: If the email is already registered
        StoreUnavailable: If the datastore call fails
    """
    email = validate_registration(email, password)

    if await user_store.find_by_email(email):
        logger.warning(f"Registration attempt for existing user: {email}")
        raise DuplicateUser(email)

    password_hash = await asyncio.to_thread(hasher.hash, password)
    # The unique constraint still rejects a concurrent registration here
    user = await user_store.insert_user(email, password_hash)

    logger.info(f"User registration: {email} (new user: {user.id})")
    return user
