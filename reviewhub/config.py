"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the reviews service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./reviewhub.db",
        description="SQLAlchemy database URL. Defaults to local SQLite for development.",
    )
    run_db_migrations: bool = Field(
        default=True,
        description="Whether the service should create database tables on startup.",
    )
    jwt_secret: str = Field(default="super-secret", description="JWT signing secret")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=60 * 24, description="Token lifetime in minutes")
    auth_cookie_name: str = Field(default="access_token", description="Cookie carrying the session token")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    upload_dir: str = Field(default="uploads", description="Directory that stores uploaded review images")
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, description="Largest accepted image upload")
    review_content_min_length: int = Field(default=100, description="Minimum review content length")
    default_page_size: int = Field(default=12, description="Reviews per page when none is requested")
    log_dir: str = Field(default="logs", description="Directory for audit log files")

    dev_login_user_id: str = Field(default="admin-user", description="Identity issued by /api/login")
    dev_login_email: str = Field(default="admin@example.com", description="Email of the development identity")
    dev_login_role: str = Field(default="admin", description="Role granted to the development identity")


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
