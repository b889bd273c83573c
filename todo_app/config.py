"""
Configuration management for the Todo App.
Supports environment variables and .env files.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL


class ConfigurationError(Exception):
    """Raised when required configuration values are missing or unreadable."""


def _read_secret(value: str | None, file_path: str | None) -> str | None:
    """Return the contents of *file_path* (trimmed) if set, else *value*."""
    if file_path:
        try:
            return Path(file_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigurationError(
                f"Unable to read configuration file {file_path}: {exc}"
            ) from exc
    return value


@dataclass(frozen=True)
class PostgresCredentials:
    """Resolved connection parameters for the PostgreSQL store."""

    host: str
    port: int
    user: str
    password: str
    database: str

    def url(self) -> URL:
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


class PostgresConfig(BaseSettings):
    """
    PostgreSQL (networked store) configuration.

    Every connection value may be given literally (``POSTGRES_USER``) or as a
    path to a secrets file (``POSTGRES_USER_FILE``). The file form wins.
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTGRES_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    host: str | None = Field(default=None, description="Database server host")
    host_file: str | None = Field(default=None, description="File holding the host")
    port: int = Field(default=5432, description="Database server port")
    port_file: str | None = Field(default=None, description="File holding the port")
    user: str | None = Field(default=None, description="Database user")
    user_file: str | None = Field(default=None, description="File holding the user")
    password: str | None = Field(default=None, description="Database password")
    password_file: str | None = Field(
        default=None, description="File holding the password"
    )
    db: str | None = Field(default=None, description="Database name")
    db_file: str | None = Field(default=None, description="File holding the database name")

    wait_timeout: float = Field(
        default=30.0, gt=0, description="Seconds to wait for the server port to open"
    )
    pool_size: int = Field(default=1, ge=1, description="Connection pool size")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @property
    def is_configured(self) -> bool:
        """True when a host value is present, selecting the networked store."""
        return bool(self.host or self.host_file)

    def resolve(self) -> PostgresCredentials:
        """Read file-based secrets and return complete credentials."""
        host = _read_secret(self.host, self.host_file)
        user = _read_secret(self.user, self.user_file)
        password = _read_secret(self.password, self.password_file)
        database = _read_secret(self.db, self.db_file)
        port_value = _read_secret(str(self.port), self.port_file)

        if not host or not user or not password or not database:
            raise ConfigurationError("Missing required PostgreSQL configuration")

        try:
            port = int(port_value or 5432)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid PostgreSQL port: {port_value!r}") from exc

        return PostgresCredentials(
            host=host, port=port, user=user, password=password, database=database
        )


class SqliteConfig(BaseSettings):
    """SQLite (embedded store) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SQLITE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    db_location: str = Field(
        default="/tmp/todo.db",
        description="Path of the SQLite database file",
    )


class ServerConfig(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )
    static_dir: str | None = Field(
        default=None,
        description="Directory with the built client bundle to serve at /"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__"
    )

    app_name: str = "Todo App"
    app_version: str = "1.0.0"
    environment: Literal["development", "test", "production"] = "development"
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerConfig = Field(default_factory=ServerConfig)
    sqlite: SqliteConfig = Field(default_factory=SqliteConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)

    @field_validator("debug", mode="before")
    @classmethod
    def validate_debug(cls, v: str | bool) -> bool:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "on")
        return False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
