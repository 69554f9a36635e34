"""Authenticator assembly.

Maps each credential variant to the strategy that verifies it, so new
providers are added by registering a variant rather than by branching in
the routes.
"""

import logging
from typing import Iterable

from login_service.core.auth.federated import FederatedStrategy
from login_service.core.auth.local import LocalStrategy
from login_service.core.auth.provider import AuthenticationStrategy
from login_service.domain.models import AuthResult, Credential
from login_service.infrastructure.auth.user_store import UserStore
from login_service.security import PasswordHasher

logger = logging.getLogger(__name__)


class Authenticator:
    """Single entry point for credential verification."""

    def __init__(self, strategies: Iterable[AuthenticationStrategy]):
        self._strategies: dict[type, AuthenticationStrategy] = {}
        for strategy in strategies:
            self._strategies[strategy.credential_type] = strategy

    async def verify(self, credential: Credential) -> AuthResult:
        """Verify a credential with the strategy registered for its type.

        Raises:
            TypeError: If no strategy handles this credential type
        """
        strategy = self._strategies.get(type(credential))
        if strategy is None:
            raise TypeError(f"No authentication strategy for {type(credential).__name__}")
        return await strategy.verify(credential)

    @property
    def supported(self) -> list[str]:
        return sorted(t.__name__ for t in self._strategies)


def build_authenticator(user_store: UserStore, hasher: PasswordHasher) -> Authenticator:
    """Create the authenticator with the local and federated strategies."""
    authenticator = Authenticator([
        LocalStrategy(user_store, hasher),
        FederatedStrategy(user_store),
    ])
    logger.info(f"Authenticator initialized: {', '.join(authenticator.supported)}")
    return authenticator
