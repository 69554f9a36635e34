"""Federated authentication strategy (find-or-create).

The identity provider has already verified the email; this strategy maps it
to a local user, creating a federated-only account on first sign-in.
"""

import logging

from login_service.core.auth.provider import AuthenticationStrategy
from login_service.domain.errors import DuplicateUser, StoreUnavailable
from login_service.domain.models import (
    FEDERATED_PASSWORD_MARKER,
    AuthResult,
    FederatedIdentity,
    normalize_email,
)
from login_service.infrastructure.auth.user_store import UserStore

logger = logging.getLogger(__name__)


class FederatedStrategy(AuthenticationStrategy):
    """Find-or-create for provider-verified identities.

    Two first-time sign-ins for the same email can both miss the lookup and
    both insert. The unique constraint rejects the second insert; that
    request then re-reads the row the first one created.
    """

    credential_type = FederatedIdentity

    def __init__(self, user_store: UserStore):
        """Initialize federated strategy.

        Args:
            user_store: Credential store adapter
        """
        self.user_store = user_store

    async def verify(self, credential: FederatedIdentity) -> AuthResult:
        """Resolve a federated identity to a local user.

        Args:
            credential: Identity asserted by the provider

        Returns:
            SUCCESS with the existing or newly created user, FAILURE if the
            provider reported no email, ERROR if the store is unavailable
        """
        email = normalize_email(credential.email)
        if not email:
            logger.warning(f"Federated login rejected: {credential.provider} returned no email")
            return AuthResult.failure("provider returned no email")

        try:
            user = await self.user_store.find_by_email(email)
            if user:
                logger.info(f"Federated login for existing user {user.id} via {credential.provider}")
                return AuthResult.success(user)

            try:
                user = await self.user_store.insert_user(email, FEDERATED_PASSWORD_MARKER)
                logger.info(f"Created federated user {user.id} via {credential.provider}")
                return AuthResult.success(user)
            except DuplicateUser as e:
                # Lost the race with a concurrent first login
                user = await self.user_store.find_by_email(email)
                if user:
                    logger.info(f"Federated login resolved concurrent insert for user {user.id}")
                    return AuthResult.success(user)
                logger.error(f"Federated insert conflicted but no row found for {email}")
                return AuthResult.error(e)

        except StoreUnavailable as e:
            logger.error(f"Federated login could not be completed for {email}: {e}")
            return AuthResult.error(e)
