# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Portal configuration loaded from the environment.

Each concern has its own BaseSettings class with an env prefix (DB_, JWT_,
RATE_LIMIT_, CORS_, API_, REVIEW_, DIRECTORY_). Settings nests them all and
is the only thing the rest of the code asks for, through get_settings().

Example:
    >>> from school_portal.core.config.settings import get_settings
    >>> get_settings().reviews.comment_max_length
    500
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-this-in-production"


class DatabaseSettings(BaseSettings):
    """Connection parameters for the portal database.

    Every school lives in this one database; queries carry the tenant
    filter.

    Attributes:
        user: Role to connect as.
        password: Password for that role.
        host: Server hostname.
        port: Server port.
        database: Database to open.
        dsn: Complete async URL (DB_DSN). Wins over the fields above.
        pool_size: Persistent connections kept in the pool.
        max_overflow: Extra connections allowed under load.
    """

    model_config = SettingsConfigDict(env_prefix="DB_", extra="ignore")

    user: str = "portal"
    password: SecretStr = SecretStr("portal_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "school_portal"
    dsn: str | None = None
    pool_size: int = 10
    max_overflow: int = 20

    def _authority(self) -> str:
        secret = self.password.get_secret_value()
        return f"{self.user}:{secret}@{self.host}:{self.port}/{self.database}"

    @property
    def url(self) -> str:
        """URL for the application engine (asyncpg unless DB_DSN says otherwise)."""
        if self.dsn:
            return self.dsn
        return f"postgresql+asyncpg://{self._authority()}"


class JWTSettings(BaseSettings):
    """Access token signing.

    Attributes:
        secret_key: HMAC key.
        algorithm: Signing algorithm name.
        access_token_expire_minutes: Token lifetime; read from
            ACCESS_TOKEN_EXPIRE_MINUTES.
    """

    model_config = SettingsConfigDict(env_prefix="JWT_", extra="ignore")

    secret_key: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )


class RateLimitSettings(BaseSettings):
    """Request throttling.

    Attributes:
        requests_per_minute: Per-client budget for throttled endpoints.
        login_per_minute: Per-IP budget for credential exchange.
        storage_uri: Where slowapi keeps its counters.
    """

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_", extra="ignore")

    requests_per_minute: int = 120
    login_per_minute: int = 10
    storage_uri: str = "memory://"


class CORSSettings(BaseSettings):
    """Cross-origin access for browser clients.

    Attributes:
        origins: Allowed origins, comma separated.
        allow_credentials: Send cookies and auth headers cross-origin.
        allow_methods: Methods browsers may use.
        allow_headers: Headers browsers may send.
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """origins split on commas, blanks dropped."""
        return [item.strip() for item in self.origins.split(",") if item.strip()]


class APISettings(BaseSettings):
    """Where and how uvicorn serves the app."""

    model_config = SettingsConfigDict(env_prefix="API_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 2
    reload: bool = False


class ReviewSettings(BaseSettings):
    """Review intake configuration.

    Attributes:
        comment_max_length: Comments longer than this are truncated.
        require_teaching_assignment: When True, a faculty member may only
            review students enrolled in a section they teach. Off by default.
    """

    model_config = SettingsConfigDict(env_prefix="REVIEW_", extra="ignore")

    comment_max_length: int = 500
    require_teaching_assignment: bool = False


class DirectorySettings(BaseSettings):
    """Directory listing configuration.

    Attributes:
        max_page_size: Upper bound applied to a requested page limit.
    """

    model_config = SettingsConfigDict(env_prefix="DIRECTORY_", extra="ignore")

    max_page_size: int = 500


class Settings(BaseSettings):
    """Everything the portal reads from its environment.

    Attributes:
        environment: Deployment stage.
        debug: Exposes the interactive docs and console log rendering.
        log_level: Threshold for the portal's own loggers.
        database: See DatabaseSettings.
        jwt: See JWTSettings.
        rate_limit: See RateLimitSettings.
        cors: See CORSSettings.
        api: See APISettings.
        reviews: See ReviewSettings.
        directory: See DirectorySettings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "test", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)
    reviews: ReviewSettings = Field(default_factory=ReviewSettings)
    directory: DirectorySettings = Field(default_factory=DirectorySettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Refuse to start production with the placeholder signing key.

        Raises:
            ValueError: If environment is production and JWT_SECRET_KEY
                was never set.
        """
        if self.is_production and self.jwt.secret_key.get_secret_value() == DEFAULT_JWT_SECRET:
            raise ValueError("Set JWT_SECRET_KEY: the default signing key is not allowed in production")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings, built on first use.

    Returns:
        The cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached Settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
