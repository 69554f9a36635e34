"""Local authentication strategy (email/password).

Looks the user up by canonical email and checks the submitted password
against the stored bcrypt digest.
"""

import asyncio
import logging

from login_service.core.auth.provider import AuthenticationStrategy
from login_service.domain.errors import StoreUnavailable
from login_service.domain.models import AuthResult, LocalCredentials, normalize_email
from login_service.infrastructure.auth.user_store import UserStore
from login_service.security import PasswordHasher

logger = logging.getLogger(__name__)


class LocalStrategy(AuthenticationStrategy):
    """Email/password verification against the user store.

    Federated-only accounts store a marker instead of a digest, so they
    always fail here without raising.
    """

    credential_type = LocalCredentials

    def __init__(self, user_store: UserStore, hasher: PasswordHasher):
        """Initialize local strategy.

        Args:
            user_store: Credential store adapter
            hasher: Password hasher used to check digests
        """
        self.user_store = user_store
        self.hasher = hasher

    async def verify(self, credential: LocalCredentials) -> AuthResult:
        """Authenticate user with email and password.

        Args:
            credential: Submitted email and plain text password

        Returns:
            SUCCESS with the user, FAILURE on unknown user or wrong password,
            ERROR if the store is unavailable
        """
        email = normalize_email(credential.email)

        try:
            user = await self.user_store.find_by_email(email)
        except StoreUnavailable as e:
            logger.error(f"Login could not be completed for {email}: {e}")
            return AuthResult.error(e)

        if not user:
            logger.warning(f"Login failed: User not found (email: {email})")
            return AuthResult.failure("user not found")

        # bcrypt is CPU bound; keep it off the event loop
        matched = await asyncio.to_thread(
            self.hasher.verify, credential.password, user.password_hash
        )
        if not matched:
            logger.warning(f"Login failed: Invalid password (email: {email})")
            return AuthResult.failure("bad credentials")

        logger.info(f"User authenticated successfully: {user.email} ({user.id})")
        return AuthResult.success(user)
