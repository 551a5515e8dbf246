"""Application configuration using Pydantic Settings.

Environment Variable Strategy:
- DATABASE_URL and SECRET_KEY are required; construction fails without them
- Everything else has a sensible default for local development
"""

from functools import cached_property

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FRONTEND_ORIGIN = "http://localhost:5173"
DEFAULT_VERIFY_TOKEN_TTL_MINUTES = 60 * 24


def parse_comma_list(value: str | list[str] | None, default: list[str]) -> list[str]:
    """Parse comma-separated string into list."""
    if value is None:
        return default
    if isinstance(value, list):
        return value
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Required:
        database_url, secret_key

    Optional (with defaults):
        All other fields
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ================================================================
    # REQUIRED - must be provided by environment
    # ================================================================

    database_url: str = Field(validation_alias="DATABASE_URL")
    secret_key: str = Field(min_length=1, validation_alias=AliasChoices("SECRET_KEY", "JWT_SECRET"))

    # ================================================================
    # OPTIONAL - have sensible defaults, rarely need override
    # ================================================================

    # Security
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, validation_alias="BCRYPT_ROUNDS")

    # Email verification
    email_verify_token_ttl_minutes: int = Field(
        default=DEFAULT_VERIFY_TOKEN_TTL_MINUTES,
        validation_alias="EMAIL_VERIFY_TOKEN_TTL_MINUTES",
    )

    # Outbound email (SMTP)
    smtp_host: str = Field(default="smtp.gmail.com", validation_alias="SMTP_HOST")
    smtp_port: int = Field(default=587, validation_alias="SMTP_PORT")
    smtp_user: str = Field(default="", validation_alias="SMTP_USER")
    smtp_pass: str = Field(default="", validation_alias="SMTP_PASS")
    email_from: str | None = Field(default=None, validation_alias="EMAIL_FROM")

    # App settings
    environment: str = Field(
        default="development", validation_alias=AliasChoices("ENVIRONMENT", "ENV")
    )
    debug: bool = False
    port: int = Field(default=5050, validation_alias="PORT")
    enable_test_utils: bool = Field(default=False, validation_alias="ENABLE_TEST_UTILS")
    seed_default_categories: bool = Field(default=True, validation_alias="SEED_DEFAULT_CATEGORIES")

    # CORS origins - stored as string, parsed via property
    # Env format: CORS_ORIGIN="http://localhost:5173,http://localhost:4173"
    cors_origin_str: str | None = Field(default=None, validation_alias="CORS_ORIGIN")

    # Used to build links back into the single-page app (verification emails)
    frontend_origin_str: str | None = Field(default=None, validation_alias="FRONTEND_ORIGIN")

    @cached_property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from env string or allow any origin."""
        return parse_comma_list(self.cors_origin_str, ["*"])

    @cached_property
    def frontend_origin(self) -> str:
        """Frontend origin without a trailing slash."""
        if self.frontend_origin_str:
            return self.frontend_origin_str.rstrip("/")
        origins = [origin for origin in self.cors_origins if origin != "*"]
        if origins:
            return origins[0].rstrip("/")
        return DEFAULT_FRONTEND_ORIGIN

    @property
    def verify_token_ttl_minutes(self) -> int:
        """Verification token lifetime, falling back to one day for non-positive values."""
        if self.email_verify_token_ttl_minutes > 0:
            return self.email_verify_token_ttl_minutes
        return DEFAULT_VERIFY_TOKEN_TTL_MINUTES

    @property
    def mail_from(self) -> str:
        return self.email_from or self.smtp_user

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")


settings = Settings()
