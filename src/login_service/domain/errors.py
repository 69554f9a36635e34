"""Login service error taxonomy.

User-facing failures (InvalidCredentials, InvalidRegistration, DuplicateUser,
LoginRequired) carry messages that are safe to show. Infrastructure failures
(StoreUnavailable, ProviderError) are logged server-side and surfaced
generically.
"""


class LoginServiceError(Exception):
    """Base class for login service errors."""
    pass


class InvalidCredentials(LoginServiceError):
    """Unknown user or wrong password."""
    pass


class InvalidRegistration(LoginServiceError):
    """Registration input rejected before touching the store."""
    pass


class DuplicateUser(LoginServiceError):
    """A user with this email already exists."""

    def __init__(self, email: str):
        super().__init__(f"User with email '{email}' already exists")
        self.email = email


class StoreUnavailable(LoginServiceError):
    """Datastore call failed; the current request is aborted."""
    pass


class ProviderError(LoginServiceError):
    """Federated handshake with the identity provider failed."""
    pass


class LoginRequired(LoginServiceError):
    """Request reached a protected resource without an authenticated session."""
    pass
