"""
SQLAlchemy models for the login service.

A single table: users(id, email unique, password).
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from login_service.domain.models import User


class Base(DeclarativeBase):
    """Declarative base for login service tables."""

    pass


class UserRecord(Base):
    """
    Row in the users table.

    `password` holds either a bcrypt digest or the federated-only marker.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<UserRecord(id={self.id}, email={self.email})>"

    def to_domain(self) -> User:
        return User(id=self.id, email=self.email, password_hash=self.password)
