"""Unit tests for authentication domain models"""

from datetime import datetime, timedelta, timezone

import pytest

from login_service.domain.models import (
    FEDERATED_PASSWORD_MARKER,
    AuthResult,
    AuthStatus,
    LocalCredentials,
    SessionRecord,
    User,
    normalize_email,
)


@pytest.mark.unit
class TestNormalizeEmail:

    @pytest.mark.parametrize("raw,expected", [
        ("alice@example.com", "alice@example.com"),
        ("  Alice@Example.COM\n", "alice@example.com"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_email(raw) == expected


@pytest.mark.unit
class TestUser:

    def test_federated_only(self):
        assert User(1, "gina@example.com", FEDERATED_PASSWORD_MARKER).is_federated_only
        assert not User(2, "alice@example.com", "$2b$10$digest").is_federated_only

    def test_repr_hides_password_hash(self):
        user = User(1, "alice@example.com", "$2b$10$secretdigest")

        assert "secretdigest" not in repr(user)


@pytest.mark.unit
class TestSessionRecord:

    def test_expiry_boundary(self):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        record = SessionRecord(user_id=1, created_at=created, expires_at=created + timedelta(hours=24))

        assert not record.is_expired(created + timedelta(hours=24) - timedelta(seconds=1))
        assert record.is_expired(created + timedelta(hours=24))

    def test_dict_round_trip_accepts_z_suffix(self):
        record = SessionRecord.from_dict({
            "user_id": "7",
            "created_at": "2024-01-01T00:00:00Z",
            "expires_at": "2024-01-02T00:00:00Z",
        })

        assert record.user_id == 7
        assert record.expires_at == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert SessionRecord.from_dict(record.to_dict()) == record


@pytest.mark.unit
class TestAuthResult:

    def test_success(self):
        user = User(1, "alice@example.com", "digest")
        result = AuthResult.success(user)

        assert result.status == AuthStatus.SUCCESS
        assert result.is_success
        assert not result.is_failure
        assert not result.is_error

    def test_failure_and_error_are_distinct(self):
        failure = AuthResult.failure("bad credentials")
        error = AuthResult.error(RuntimeError("store down"))

        assert failure.is_failure and not failure.is_error
        assert error.is_error and not error.is_failure
        assert not failure.is_success
        assert not error.is_success

    def test_credentials_repr_hides_password(self):
        assert "hunter2" not in repr(LocalCredentials("alice@example.com", "hunter2"))
