"""User Storage System

Purpose: Credential store adapter over the relational users table

Each operation is a single parameterized statement run in its own session,
so atomicity is per call. Email uniqueness is enforced by the table's unique
constraint as well as by callers' pre-checks.

Error mapping:
- unique violation on insert -> DuplicateUser
- any other SQLAlchemy / connection failure -> StoreUnavailable
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from login_service.domain.errors import DuplicateUser, StoreUnavailable
from login_service.domain.models import User, normalize_email
from login_service.infrastructure.db.database import Database
from login_service.infrastructure.db.models import UserRecord

logger = logging.getLogger(__name__)


class UserStore:
    """SQL-backed user store

    Storage Schema:
    - users(id serial primary key, email varchar(255) unique, password varchar(255))
    """

    def __init__(self, database: Database):
        """Initialize user store

        Args:
            database: Datastore handle
        """
        self.database = database

    async def find_by_email(self, email: str) -> Optional[User]:
        """Get user by email address

        Args:
            email: Email address to search for (canonicalized before lookup)

        Returns:
            User if found, None otherwise

        Raises:
            StoreUnavailable: If the query fails, or more than one row matches
        """
        email = normalize_email(email)
        if not email:
            return None

        try:
            async with self.database.session() as session:
                result = await session.execute(
                    select(UserRecord).where(UserRecord.email == email).limit(2)
                )
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"User lookup for {email} failed: {type(e).__name__}")
            raise StoreUnavailable("User lookup failed") from e

        if len(rows) > 1:
            logger.error(f"Data integrity fault: multiple users share email {email}")
            raise StoreUnavailable("Duplicate user rows for one email")

        return rows[0].to_domain() if rows else None

    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID

        Args:
            user_id: User identifier

        Returns:
            User if found, None otherwise

        Raises:
            StoreUnavailable: If the query fails
        """
        try:
            async with self.database.session() as session:
                record = await session.get(UserRecord, user_id)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"User lookup by id {user_id} failed: {type(e).__name__}")
            raise StoreUnavailable("User lookup failed") from e

        return record.to_domain() if record else None

    async def insert_user(self, email: str, password_hash: str) -> User:
        """Create a new user row

        Args:
            email: Email address (canonicalized before insert)
            password_hash: bcrypt digest or the federated-only marker

        Returns:
            Created User including its generated id

        Raises:
            DuplicateUser: If the email is already taken
            StoreUnavailable: If the insert fails for any other reason
        """
        email = normalize_email(email)
        try:
            async with self.database.session() as session:
                record = UserRecord(email=email, password=password_hash)
                session.add(record)
                await session.commit()
                user_id = record.id
        except IntegrityError as e:
            logger.warning(f"Insert rejected by unique constraint for {email}")
            raise DuplicateUser(email) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to insert user {email}: {type(e).__name__}")
            raise StoreUnavailable("User creation failed") from e

        logger.info(f"Created user {user_id} ({email})")
        return User(id=user_id, email=email, password_hash=password_hash)

    async def count_by_email(self, email: str) -> int:
        """Number of rows stored for an email

        Not used by request handling; meant for tests and data-integrity
        checks (the unique constraint should keep this at 0 or 1).
        """
        email = normalize_email(email)
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    select(func.count()).select_from(UserRecord).where(UserRecord.email == email)
                )
                return result.scalar_one()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to count users for {email}: {type(e).__name__}")
            raise StoreUnavailable("User count failed") from e

    async def ping(self) -> bool:
        """Check datastore health"""
        return await self.database.ping()
