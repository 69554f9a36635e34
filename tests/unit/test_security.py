"""
Unit tests for security utilities (password hashing and cookie signing).
"""

import pytest
from jose import jwt

from login_service.domain.models import FEDERATED_PASSWORD_MARKER
from login_service.security import (
    COOKIE_ALGORITHM,
    PasswordHasher,
    create_oauth_state,
    new_session_id,
    sign_session_id,
    unsign_session_id,
    verify_oauth_state,
)

pytestmark = pytest.mark.unit

SECRET = "unit-test-secret"


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_returns_bcrypt_digest(self, hasher):
        """Test that hash returns a salted bcrypt string, not the plaintext."""
        hashed = hasher.hash("testpassword123")

        assert isinstance(hashed, str)
        assert hashed.startswith("$2")
        assert hashed != "testpassword123"

    def test_hash_embeds_cost(self):
        """Test that the configured work factor is recorded in the digest."""
        hashed = PasswordHasher(rounds=5).hash("testpassword123")

        assert hashed.split("$")[2] == "05"

    def test_hash_different_each_time(self, hasher):
        """Test that same password produces different hashes (salt)."""
        assert hasher.hash("testpassword123") != hasher.hash("testpassword123")

    def test_verify_correct(self, hasher):
        hashed = hasher.hash("testpassword123")

        assert hasher.verify("testpassword123", hashed) is True

    def test_verify_incorrect(self, hasher):
        hashed = hasher.hash("testpassword123")

        assert hasher.verify("wrongpassword", hashed) is False

    def test_verify_empty_password(self, hasher):
        hashed = hasher.hash("testpassword123")

        assert hasher.verify("", hashed) is False

    def test_verify_against_federated_marker(self, hasher):
        """Test that the non-hash marker never verifies and never raises."""
        assert hasher.verify("google", FEDERATED_PASSWORD_MARKER) is False
        assert hasher.verify("anything", FEDERATED_PASSWORD_MARKER) is False

    def test_verify_against_garbage_digest(self, hasher):
        assert hasher.verify("testpassword123", "not-a-bcrypt-hash") is False

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_rejects_out_of_range_cost(self, rounds):
        with pytest.raises(ValueError):
            PasswordHasher(rounds=rounds)


class TestSessionCookie:
    """Test signed session cookie values."""

    def test_new_session_ids_are_unique(self):
        assert len({new_session_id() for _ in range(50)}) == 50

    def test_sign_and_unsign(self):
        session_id = new_session_id()

        cookie = sign_session_id(session_id, SECRET)

        assert cookie != session_id
        assert unsign_session_id(cookie, SECRET) == session_id

    def test_unsign_with_wrong_secret(self):
        """Test that a cookie signed with another secret is rejected."""
        cookie = sign_session_id(new_session_id(), "some-other-secret")

        assert unsign_session_id(cookie, SECRET) is None

    def test_unsign_tampered_cookie(self):
        header, _, signature = sign_session_id(new_session_id(), SECRET).split(".")
        forged_payload = jwt.encode({"sid": "attacker"}, "x", algorithm=COOKIE_ALGORITHM).split(".")[1]
        tampered = f"{header}.{forged_payload}.{signature}"

        assert unsign_session_id(tampered, SECRET) is None

    @pytest.mark.parametrize("value", [None, "", "not-a-jwt", "a.b.c"])
    def test_unsign_malformed(self, value):
        assert unsign_session_id(value, SECRET) is None

    def test_unsign_without_sid_claim(self):
        cookie = jwt.encode({"user": "1"}, SECRET, algorithm=COOKIE_ALGORITHM)

        assert unsign_session_id(cookie, SECRET) is None


class TestOAuthState:
    """Test CSRF state cookie for the Google flow."""

    def test_matching_state_verifies(self):
        state, cookie = create_oauth_state(SECRET)

        assert verify_oauth_state(cookie, state, SECRET) is True

    def test_mismatched_state(self):
        _, cookie = create_oauth_state(SECRET)
        other_state, _ = create_oauth_state(SECRET)

        assert verify_oauth_state(cookie, other_state, SECRET) is False

    def test_wrong_secret(self):
        state, cookie = create_oauth_state("some-other-secret")

        assert verify_oauth_state(cookie, state, SECRET) is False

    def test_expired_state(self):
        state, cookie = create_oauth_state(SECRET, ttl_seconds=-60)

        assert verify_oauth_state(cookie, state, SECRET) is False

    def test_session_cookie_is_not_a_state_cookie(self):
        """Test that tokens of another type cannot stand in for the state cookie."""
        session_id = new_session_id()
        cookie = sign_session_id(session_id, SECRET)

        assert verify_oauth_state(cookie, session_id, SECRET) is False

    @pytest.mark.parametrize("cookie,state", [(None, "s"), ("", "s"), ("x", None), ("x", "")])
    def test_missing_values(self, cookie, state):
        assert verify_oauth_state(cookie, state, SECRET) is False
