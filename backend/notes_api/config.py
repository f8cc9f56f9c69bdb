"""
Notes API: Application Configuration
====================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types and ranges, and provides a singleton `settings` object.
Who:   Read by the app factory, the database layer and the posts client.
When:  Loaded once at module import time.

Recognized environment:
    DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME   connection parts
    DB_DRIVER                                         SQLAlchemy async driver:
                                                      postgresql+asyncpg (default)
                                                      or mysql+aiomysql (`mysql` extra)
    DATABASE_URL                                      full URL, overrides the parts
    DB_POOL_SIZE, DB_POOL_TIMEOUT, DB_POOL_PRE_PING   pool policy
    HOST, PORT                                        listen address (port 3000)
    POSTS_SOURCE_URL, POSTS_LIMIT, POSTS_TIMEOUT      upstream posts source
"""

from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments override
    the database credentials through the environment.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Either a complete DATABASE_URL, or the individual parts below which are
    # assembled into a URL by sqlalchemy_url().
    database_url: Optional[str] = Field(
        default=None,
        description="Full async SQLAlchemy URL; takes precedence over DB_* parts",
    )
    db_driver: str = Field(default="postgresql+asyncpg")
    db_host: str = Field(default="localhost")
    db_port: Optional[int] = Field(default=None, ge=1, le=65535)
    db_user: str = Field(default="notes")
    db_password: str = Field(default="")
    db_name: str = Field(default="notes")

    # Fixed pool capacity; no overflow connections are opened beyond it.
    db_pool_size: int = Field(default=10, ge=1, le=100)

    # Longest a caller waits for a free pooled connection before the request
    # fails with a storage error.
    db_pool_timeout: float = Field(default=30.0, gt=0, le=600)

    db_pool_pre_ping: bool = Field(default=True)

    # Create missing tables at startup (local development only).
    db_create_schema: bool = Field(default=False)

    # ── Upstream posts source ─────────────────────────────────────────────
    posts_source_url: str = Field(default="https://jsonplaceholder.typicode.com/posts")
    posts_limit: int = Field(default=5, ge=1, le=100)
    posts_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: comma-separated origins, or "*" for any.
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DB_HOST and db_host both work
        "extra": "ignore",
    }

    def sqlalchemy_url(self) -> Union[str, URL]:
        """
        What:  The URL handed to create_async_engine().
        How:   DATABASE_URL verbatim when set; otherwise URL.create() from the
               DB_* parts, which escapes special characters in the password.
        """
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host or None,
            port=self.db_port,
            database=self.db_name or None,
        )


# Singleton instance, imported throughout the application
settings = Settings()
