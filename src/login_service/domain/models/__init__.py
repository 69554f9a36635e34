"""Domain models for Login Service"""

from login_service.domain.models.auth import (
    FEDERATED_PASSWORD_MARKER,
    AuthResult,
    AuthStatus,
    Credential,
    FederatedIdentity,
    LocalCredentials,
    SessionRecord,
    User,
    normalize_email,
    parse_utc_timestamp,
    to_json_compatible,
)

__all__ = [
    "FEDERATED_PASSWORD_MARKER",
    "AuthResult",
    "AuthStatus",
    "Credential",
    "FederatedIdentity",
    "LocalCredentials",
    "SessionRecord",
    "User",
    "normalize_email",
    "parse_utc_timestamp",
    "to_json_compatible",
]
