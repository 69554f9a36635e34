"""Configuration Settings for Login Service

Manages environment variables and application configuration.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

DEFAULT_SESSION_SECRET = "dev-session-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings"""

    # Service info
    service_name: str = "login-service"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # PostgreSQL configuration
    pg_host: str = "localhost"
    pg_port: int = 5432
    pg_user: str = "postgres"
    pg_password: str = ""
    pg_database: str = "secrets"
    database_url: Optional[str] = None
    sql_echo: bool = False

    @property
    def resolved_database_url(self) -> str:
        """Database URL, built from the PG_* components unless DATABASE_URL is set"""
        if self.database_url:
            if self.database_url.startswith("postgresql://"):
                return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return self.database_url
        credentials = self.pg_user
        if self.pg_password:
            credentials = f"{self.pg_user}:{self.pg_password}"
        return (
            f"postgresql+asyncpg://{credentials}@{self.pg_host}:{self.pg_port}/{self.pg_database}"
        )

    # Session configuration
    session_secret: str = DEFAULT_SESSION_SECRET
    session_ttl_seconds: int = 24 * 60 * 60  # 24 hours, fixed from issuance
    session_cookie_name: str = "login_session"
    session_cookie_secure: bool = False
    session_backend: str = "memory"  # memory or redis

    # Redis configuration (session_backend=redis)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    @property
    def redis_url(self) -> str:
        """Construct Redis URL from components"""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Google OAuth configuration
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_callback_url: str = "http://localhost:3000/auth/google/secrets"

    @property
    def google_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    # Password hashing
    bcrypt_rounds: int = 10

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
