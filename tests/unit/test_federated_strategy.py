"""Unit tests for FederatedStrategy (find-or-create)"""

import pytest

from login_service.core.auth.federated import FederatedStrategy
from login_service.domain.models import FEDERATED_PASSWORD_MARKER, FederatedIdentity
from login_service.infrastructure.auth.user_store import UserStore


class RacingUserStore(UserStore):
    """User store where another request inserts the same email right after
    the first lookup, so this request's insert hits the unique constraint."""

    def __init__(self, database):
        super().__init__(database)
        self.raced = False

    async def find_by_email(self, email):
        if not self.raced:
            self.raced = True
            await self.insert_user(email, FEDERATED_PASSWORD_MARKER)
            return None
        return await super().find_by_email(email)


def google_identity(email: str) -> FederatedIdentity:
    return FederatedIdentity(provider="google", email=email, subject="1234567890")


@pytest.fixture
def strategy(user_store):
    return FederatedStrategy(user_store)


@pytest.mark.unit
class TestFederatedStrategy:
    """Test federated identity resolution"""

    @pytest.mark.asyncio
    async def test_first_login_creates_user(self, strategy, user_store):
        """First sign-in creates exactly one federated-only account"""
        # Act
        result = await strategy.verify(google_identity("gina@example.com"))

        # Assert
        assert result.is_success
        assert result.user.email == "gina@example.com"
        assert result.user.password_hash == FEDERATED_PASSWORD_MARKER
        assert await user_store.count_by_email("gina@example.com") == 1

    @pytest.mark.asyncio
    async def test_repeat_login_returns_same_user(self, strategy, user_store):
        first = await strategy.verify(google_identity("gina@example.com"))
        second = await strategy.verify(google_identity("Gina@Example.com"))

        assert second.is_success
        assert second.user.id == first.user.id
        assert await user_store.count_by_email("gina@example.com") == 1

    @pytest.mark.asyncio
    async def test_existing_local_account_is_reused(self, strategy, user_store, test_user):
        """A local account with the same email is signed in, not duplicated"""
        result = await strategy.verify(google_identity("alice@example.com"))

        assert result.is_success
        assert result.user.id == test_user.id
        # Password digest is left untouched
        assert result.user.password_hash == test_user.password_hash
        assert await user_store.count_by_email("alice@example.com") == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["", "   "])
    async def test_missing_email(self, strategy, email):
        result = await strategy.verify(google_identity(email))

        assert result.is_failure
        assert result.user is None

    @pytest.mark.asyncio
    async def test_lost_insert_race_resolves_to_winner(self, database):
        """Unique-constraint conflict on insert re-reads the winning row"""
        store = RacingUserStore(database)
        strategy = FederatedStrategy(store)

        result = await strategy.verify(google_identity("gina@example.com"))

        assert store.raced
        assert result.is_success
        assert result.user.email == "gina@example.com"
        assert await store.count_by_email("gina@example.com") == 1

    @pytest.mark.asyncio
    async def test_store_unavailable(self, unreachable_database):
        strategy = FederatedStrategy(UserStore(unreachable_database))

        result = await strategy.verify(google_identity("gina@example.com"))

        assert result.is_error
        assert result.user is None
