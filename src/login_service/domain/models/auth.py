"""Authentication Data Models

Purpose: Define data structures for users, sessions and authentication results

Key Components:
- User: A persisted account (local password or federated-only)
- SessionRecord: Server-side session state for an authenticated principal
- LocalCredentials / FederatedIdentity: Credential variants fed to strategies
- AuthResult: Outcome of a credential check (success, failure or error)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

# Stored in place of a password hash for accounts created through Google.
# Not a bcrypt digest, so local password verification always fails against it.
FEDERATED_PASSWORD_MARKER = "google"


def normalize_email(email: Optional[str]) -> str:
    """Canonical form used for every lookup and insert."""
    if not email:
        return ""
    return email.strip().lower()


def parse_utc_timestamp(timestamp_str: str) -> datetime:
    """Parse UTC timestamp string to datetime object"""
    if isinstance(timestamp_str, datetime):
        return timestamp_str
    return datetime.fromisoformat(timestamp_str.replace('Z', '+00:00'))


def to_json_compatible(value):
    """Convert datetime to JSON-compatible ISO format string"""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass
class User:
    """User account

    Attributes:
        id: Database-generated identifier
        email: Canonical email address (unique)
        password_hash: bcrypt digest, or FEDERATED_PASSWORD_MARKER
    """
    id: int
    email: str
    password_hash: str = field(repr=False)

    @property
    def is_federated_only(self) -> bool:
        """True for accounts that can only sign in through the identity provider"""
        return self.password_hash == FEDERATED_PASSWORD_MARKER


@dataclass
class SessionRecord:
    """Server-side session state

    Only the user id is kept; the full user is re-read from the
    datastore when the session is resolved.

    Attributes:
        user_id: Authenticated principal
        created_at: Issuance timestamp
        expires_at: Absolute expiry (created_at + TTL, not sliding)
    """
    user_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if session is past its expiry"""
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "user_id": self.user_id,
            "created_at": to_json_compatible(self.created_at),
            "expires_at": to_json_compatible(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SessionRecord':
        """Create from dictionary (JSON deserialization)"""
        return cls(
            user_id=int(data["user_id"]),
            created_at=parse_utc_timestamp(data["created_at"]),
            expires_at=parse_utc_timestamp(data["expires_at"]),
        )


@dataclass(frozen=True)
class LocalCredentials:
    """Email/password pair submitted to the login form"""
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class FederatedIdentity:
    """Identity asserted by a trusted external provider

    Attributes:
        provider: Provider name (e.g. 'google')
        email: Email reported by the provider
        subject: Provider's stable user identifier, if reported
    """
    provider: str
    email: str
    subject: Optional[str] = None


Credential = Union[LocalCredentials, FederatedIdentity]


class AuthStatus(Enum):
    """Credential verification outcome"""
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


@dataclass
class AuthResult:
    """Result of a credential verification

    FAILURE means the credentials did not match and is safe to report
    generically. ERROR means verification could not be completed
    (e.g. the store is unavailable) and must not be reported as FAILURE.

    Attributes:
        status: Outcome (AuthStatus enum)
        user: Authenticated user on SUCCESS
        reason: Failure description on FAILURE
        cause: Underlying exception on ERROR
    """
    status: AuthStatus
    user: Optional[User] = None
    reason: Optional[str] = None
    cause: Optional[BaseException] = None

    @classmethod
    def success(cls, user: User) -> 'AuthResult':
        return cls(status=AuthStatus.SUCCESS, user=user)

    @classmethod
    def failure(cls, reason: str) -> 'AuthResult':
        return cls(status=AuthStatus.FAILURE, reason=reason)

    @classmethod
    def error(cls, cause: BaseException) -> 'AuthResult':
        return cls(status=AuthStatus.ERROR, cause=cause)

    @property
    def is_success(self) -> bool:
        """Check if verification succeeded"""
        return self.status == AuthStatus.SUCCESS and self.user is not None

    @property
    def is_failure(self) -> bool:
        return self.status == AuthStatus.FAILURE

    @property
    def is_error(self) -> bool:
        return self.status == AuthStatus.ERROR
