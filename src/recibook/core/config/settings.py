"""Application configuration using Pydantic Settings with YAML support.

Sources, highest priority first:
1. Values passed to ``Settings()``
2. Environment variables (nested via ``__``, e.g. ``STORE__BACKEND=postgres``)
3. ``.env`` file (secrets)
4. ``config/environments/{APP_ENV}/*.yaml``
5. ``config/base/*.yaml``
6. Defaults declared below
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class StoreBackend(StrEnum):
    """Document store implementations."""

    FIRESTORE = "firestore"
    POSTGRES = "postgres"


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recibook Data Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server bind settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """HTTP facade settings."""

    v1_prefix: str = "/api/v1"
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []
    user_id_header: str = "X-User-ID"
    user_name_header: str = "X-User-Name"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class StoreSettings(BaseModel):
    """Which document store backs the repositories."""

    backend: StoreBackend = StoreBackend.FIRESTORE


class FirestoreSettings(BaseModel):
    """Cloud Firestore client settings.

    Credentials are resolved by google-auth (GOOGLE_APPLICATION_CREDENTIALS,
    workload identity, or the emulator via FIRESTORE_EMULATOR_HOST).
    """

    project: str | None = None
    database: str = "(default)"


class DatabaseSettings(BaseModel):
    """PostgreSQL settings for the JSONB document store."""

    host: str = "localhost"
    port: int = 5432
    name: str = "recibook"
    user: str | None = None
    table: str = "documents"
    min_pool_size: int = 2
    max_pool_size: int = 10
    command_timeout: float = 30.0
    ssl: bool = False


class StorageSettings(BaseModel):
    """Object storage settings for recipe images."""

    bucket: str | None = None
    project: str | None = None
    prefix: str = "recipes"
    public_base_url: str | None = None  # e.g. a CDN in front of the bucket
    fetch_timeout: float = 20.0


class FeedSettings(BaseModel):
    """Feed composition settings."""

    # Firestore caps the values of an "in" filter
    batch_size: int = Field(default=10, ge=1)


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    logging: LoggingSettings = LoggingSettings()
    store: StoreSettings = StoreSettings()
    firestore: FirestoreSettings = FirestoreSettings()
    database: DatabaseSettings = DatabaseSettings()
    storage: StorageSettings = StorageSettings()
    feed: FeedSettings = FeedSettings()

    # Secrets (from environment / .env only - never in YAML)
    DATABASE_PASSWORD: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source between .env and file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def database_url(self) -> str:
        """PostgreSQL DSN without the password (safe to log)."""
        auth_part = f"{self.database.user}@" if self.database.user else ""
        return (
            f"postgresql://{auth_part}{self.database.host}:"
            f"{self.database.port}/{self.database.name}"
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
