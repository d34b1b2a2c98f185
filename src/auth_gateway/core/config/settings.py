"""Gateway settings.

Non-secret configuration lives in YAML under ``config/`` and is layered per
``APP_ENV``. Signing keys, the Google client secret and the database
password come from the environment or ``.env`` only.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class StorageBackend(StrEnum):
    """Backing used for products, users and API keys.

    - MEMORY: Process-local dictionaries (demo mode)
    - POSTGRES: PostgreSQL via asyncpg
    """

    MEMORY = "memory"
    POSTGRES = "postgres"


# =============================================================================
# Section models
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Product Auth Gateway"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8080


class ApiSettings(BaseModel):
    """API configuration settings."""

    prefix: str = ""
    docs_enabled: bool = True


class BasicAuthSettings(BaseModel):
    """HTTP Basic settings."""

    realm: str = "Product API"


class ApiKeyAuthSettings(BaseModel):
    """API key settings."""

    header: str = "x-api-key"


class JwtSettings(BaseModel):
    """Self-issued bearer token settings."""

    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    issuer: str | None = None


class OAuthSettings(BaseModel):
    """Delegated OAuth2 provider settings."""

    provider: str = "google"
    client_id: str | None = None
    token_url: str = "https://oauth2.googleapis.com/token"
    userinfo_url: str = "https://www.googleapis.com/oauth2/v2/userinfo"
    redirect_uri: str = "postmessage"
    timeout: float = 5.0


class UserSeedSettings(BaseModel):
    """A user provisioned into the credential source at startup.

    Either ``password_hash`` (preferred) or ``password`` must be given.
    A plaintext ``password`` is hashed when the store is seeded.
    """

    username: str
    password_hash: str | None = None
    password: str | None = None

    @model_validator(mode="after")
    def _require_secret(self) -> UserSeedSettings:
        if not self.password_hash and not self.password:
            msg = f"User seed '{self.username}' needs password_hash or password"
            raise ValueError(msg)
        return self


class ApiKeySeedSettings(BaseModel):
    """An API key provisioned at startup."""

    key: str
    owner: str
    active: bool = True


class AuthSettings(BaseModel):
    """Authentication configuration settings."""

    basic: BasicAuthSettings = BasicAuthSettings()
    api_key: ApiKeyAuthSettings = ApiKeyAuthSettings()
    jwt: JwtSettings = JwtSettings()
    oauth: OAuthSettings = OAuthSettings()
    password_hash_iterations: int = Field(default=600_000, ge=1)
    users: list[UserSeedSettings] = []
    api_keys: list[ApiKeySeedSettings] = []


class StorageSettings(BaseModel):
    """Storage backend selection."""

    backend: StorageBackend = StorageBackend.MEMORY


class DatabaseSettings(BaseModel):
    """PostgreSQL database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    name: str = "products"
    user: str | None = None  # PostgreSQL username
    min_pool_size: int = 2  # Minimum connections in pool
    max_pool_size: int = 10  # Maximum connections in pool
    command_timeout: float = 30.0  # Query timeout in seconds
    ssl: bool = False  # Enable SSL connection


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class TracingSettings(BaseModel):
    """Tracing configuration settings."""

    enabled: bool = True
    otlp_endpoint: str | None = None


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    tracing: TracingSettings = TracingSettings()
    metrics: MetricsSettings = MetricsSettings()


# =============================================================================
# Root settings
# =============================================================================


class Settings(BaseSettings):
    """Root settings object.

    Sources, first match wins:
    1. Constructor keyword arguments
    2. Process environment
    3. .env
    4. config/environments/{APP_ENV}/*.yaml
    5. config/base/*.yaml
    6. Field defaults

    Nested keys use ``__`` in environment variables, so
    AUTH__OAUTH__TIMEOUT=2.5 sets auth.oauth.timeout.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    # =========================================================================
    # Deployment environment
    # =========================================================================
    APP_ENV: str = "development"

    # =========================================================================
    # Sections (YAML)
    # =========================================================================
    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    auth: AuthSettings = AuthSettings()
    storage: StorageSettings = StorageSettings()
    database: DatabaseSettings = DatabaseSettings()
    logging: LoggingSettings = LoggingSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    # =========================================================================
    # Secrets (environment only)
    # =========================================================================
    JWT_SECRET_KEY: str = ""
    GOOGLE_CLIENT_SECRET: str | None = None
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
        """Slot the YAML layers between .env and file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def is_development(self) -> bool:
        """Local development: colourised text logs."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Docs are hidden and a JWT secret is mandatory."""
        return self.APP_ENV == "production"

    @property
    def access_token_expire_seconds(self) -> int:
        """Validity window of a self-issued bearer token."""
        return self.auth.jwt.access_token_expire_minutes * 60


@lru_cache
def get_settings() -> Settings:
    """Settings for the running process, loaded once."""
    return Settings()
