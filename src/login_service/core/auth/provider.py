"""Authentication strategy interface.

Every credential-verification method implements the same single operation,
so the route layer treats local and federated sign-in uniformly.
"""

from abc import ABC, abstractmethod

from login_service.domain.models import AuthResult, Credential


class AuthenticationStrategy(ABC):
    """Abstract credential verifier.

    Contract:
        - SUCCESS when the credential identifies a user
        - FAILURE when it does not (never raised as an exception)
        - ERROR when verification could not complete (e.g. store outage)
    """

    #: Credential variant this strategy accepts
    credential_type: type

    @abstractmethod
    async def verify(self, credential: Credential) -> AuthResult:
        """Verify a credential.

        Args:
            credential: Credential variant matching credential_type

        Returns:
            AuthResult describing the outcome
        """
        pass
