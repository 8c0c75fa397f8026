"""Settings for humans.inc.

Values come from ``HUMANS_*`` environment variables or a ``.env`` file and
are validated once, when ``get_settings()`` is first called.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-use-openssl-rand-hex-32"

Environment = Literal["development", "production", "testing"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
# Read from the environment as a comma-separated string
CommaList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Process-wide configuration.

    List settings (CORS origins, reserved usernames, avatar types) are
    comma-separated in the environment, e.g.
    ``HUMANS_RESERVED_USERNAMES=admin,api,login``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HUMANS_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "humans.inc"
    app_version: str = "0.1.0"
    environment: Environment = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    # Base URL of public pages and of locally served files
    external_url: str = "http://localhost:8000"

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = Field(default=1, ge=1)

    database_url: str = "sqlite+aiosqlite:///./humans_data/humans.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    secret_key: str = Field(default=DEFAULT_SECRET_KEY, description="HMAC key for JWT signing")
    access_token_expire_minutes: int = Field(default=60, gt=0)
    refresh_token_expire_days: int = Field(default=7, gt=0)
    min_password_length: int = Field(default=6, ge=1)

    cors_origins: CommaList = Field(default=["http://localhost:3000", "http://localhost:8000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    log_level: LogLevel = "INFO"
    log_format: Literal["json", "console"] = "json"

    storage_provider: Literal["local", "s3"] = "local"
    storage_path: str = "./humans_data/files"
    avatar_bucket: str = Field(default="avatars", pattern=r"^[a-z0-9][a-z0-9_-]*$")
    avatar_cache_control: str = "3600"
    max_avatar_size: int = Field(default=5 * 1024 * 1024, gt=0)
    allowed_avatar_types: CommaList = Field(
        default=["image/jpeg", "image/png", "image/gif", "image/webp"]
    )
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_access_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None
    s3_public_url: str | None = Field(
        default=None,
        description="Base URL objects are publicly served from (defaults to the bucket URL)",
    )

    # Usernames that would shadow a top-level route of the web app
    reserved_usernames: CommaList = Field(
        default=[
            "login",
            "signup",
            "api",
            "admin",
            "dashboard",
            "profile",
            "settings",
            "legal",
            "help",
            "contact",
        ]
    )

    @field_validator(
        "cors_origins", "reserved_usernames", "allowed_avatar_types", mode="before"
    )
    @classmethod
    def split_comma_separated(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("reserved_usernames")
    @classmethod
    def lowercase_reserved_usernames(cls, v: list[str]) -> list[str]:
        return [name.lower() for name in v]

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Force a leading slash and drop any trailing one: ``api/v1/`` -> ``/api/v1``."""
        return "/" + v.strip("/")

    @field_validator("external_url", "s3_public_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @model_validator(mode="after")
    def check_deployment(self) -> "Settings":
        """Reject combinations that cannot work at runtime.

        Raises:
            ValueError: For SQLite with several workers, S3 storage without
                a bucket, or production with the default secret key.
        """
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                f"SQLite supports a single worker process, got workers={self.workers}. "
                "Use HUMANS_WORKERS=1 or a PostgreSQL HUMANS_DATABASE_URL."
            )
        if self.storage_provider == "s3" and not self.s3_bucket:
            raise ValueError("HUMANS_S3_BUCKET is required when storage_provider is 's3'")
        if self.is_production and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("Set HUMANS_SECRET_KEY before running in production")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the settings, loading them on first use."""
    return Settings()
