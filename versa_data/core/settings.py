from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the data layer.

    This is separate from versa_data.db.config.Settings, which focuses on the
    DynamoDB table and AWS connection.
    """

    APP_NAME: str = Field(default="Versa Data")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name")

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(
        default=20, ge=1, description="Page size used when a list call passes no limit"
    )
    MAX_PAGE_SIZE: int = Field(
        default=1000, ge=1, description="Largest page a single list call may request"
    )

    # Organization secret bundles (AWS Secrets Manager)
    SECRET_NAME_PREFIX: str = Field(default="versa/org/")
    SECRET_NAME_SUFFIX: str = Field(default="/secrets")
    SECRETS_MAX_WRITE_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        description="Read-merge-write attempts before a concurrent change is reported as a conflict.",
    )
    SECRETS_MANAGER_ENDPOINT: Optional[str] = Field(
        default=None, description="Override endpoint (e.g. LocalStack) for Secrets Manager."
    )

    # Automatically load from .env at runtime. The deployment will provide these.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, v):
        """Accept log level names in any case."""
        if v is None:
            return "INFO"
        return str(v).strip().upper() or "INFO"


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    Note:
      For simplicity we construct a new instance each time. Long-lived objects
      (the store, the secret adapter) read it once at construction.
    """
    return AppSettings()
