"""
Security utilities for the login service.

Provides password hashing and verification using bcrypt, and signing of the
session and OAuth state cookies using JWT (HS256).
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

COOKIE_ALGORITHM = "HS256"
OAUTH_STATE_TTL_SECONDS = 300


class PasswordHasher:
    """
    Salted one-way password hashing with a fixed work factor.

    The cost is chosen once at construction; every digest embeds its own
    random salt and cost, so verification needs only the digest.
    """

    def __init__(self, rounds: int = 10):
        """
        Args:
            rounds: bcrypt cost parameter (log2 of iterations, 4-31)
        """
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            plaintext: Plain text password

        Returns:
            Hashed password as string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(plaintext.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plaintext: Plain text password to verify
            digest: Previously hashed password (or a non-hash marker)

        Returns:
            True if password matches, False otherwise
        """
        if not plaintext or not digest:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except (ValueError, TypeError):
            # Not a bcrypt digest (e.g. federated marker) or over-long input
            return False


def new_session_id() -> str:
    """Generate an opaque session identifier."""
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, secret: str) -> str:
    """
    Wrap a session id in a signed cookie value.

    Expiry is enforced server-side, so the token carries no exp claim.
    """
    return jwt.encode({"sid": session_id}, secret, algorithm=COOKIE_ALGORITHM)


def unsign_session_id(cookie_value: Optional[str], secret: str) -> Optional[str]:
    """
    Recover the session id from a signed cookie value.

    Returns:
        Session id, or None if the cookie is missing, forged or malformed
    """
    if not cookie_value:
        return None
    try:
        payload = jwt.decode(cookie_value, secret, algorithms=[COOKIE_ALGORITHM])
    except JWTError:
        return None
    session_id = payload.get("sid")
    return session_id if isinstance(session_id, str) and session_id else None


def create_oauth_state(secret: str, ttl_seconds: int = OAUTH_STATE_TTL_SECONDS) -> tuple[str, str]:
    """
    Create a CSRF state value and its signed cookie form.

    Returns:
        Tuple of (state, signed_cookie_value)
    """
    state = secrets.token_urlsafe(32)
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "state": state,
            "type": "oauth_state",
            "iat": now,
            "exp": now + timedelta(seconds=ttl_seconds),
        },
        secret,
        algorithm=COOKIE_ALGORITHM,
    )
    return state, token


def verify_oauth_state(cookie_value: Optional[str], state: Optional[str], secret: str) -> bool:
    """
    Check that the state echoed by the provider matches the signed cookie.

    Returns:
        True if the cookie is valid, unexpired and carries the same state
    """
    if not cookie_value or not state:
        return False
    try:
        payload = jwt.decode(cookie_value, secret, algorithms=[COOKIE_ALGORITHM])
    except JWTError:
        return False
    if payload.get("type") != "oauth_state":
        return False
    expected = payload.get("state")
    if not isinstance(expected, str):
        return False
    return secrets.compare_digest(expected, state)
