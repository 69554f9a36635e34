"""Authentication strategies and session lifecycle.

Supports two credential-verification methods behind one interface:
- local: email/password checked against bcrypt digests
- federated: Google OAuth 2.0 identities, find-or-create
"""

from .provider import AuthenticationStrategy
from .factory import Authenticator, build_authenticator
from .session import SessionManager

__all__ = [
    "AuthenticationStrategy",
    "Authenticator",
    "SessionManager",
    "build_authenticator",
]
