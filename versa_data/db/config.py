from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the DynamoDB single table and the AWS connection.

    Reads from environment variables (or .env via pydantic-settings):
      - TABLE_NAME
      - AWS_REGION
      - LOCAL_DYNAMODB_ENDPOINT (DynamoDB Local / LocalStack)
    """

    TABLE_NAME: str = Field(default="versa-table", description="Single-table name")
    AWS_REGION: str = Field(default="us-east-1", description="AWS region for all clients")
    LOCAL_DYNAMODB_ENDPOINT: Optional[str] = Field(
        default=None, description="If provided, endpoint URL of a local DynamoDB."
    )

    # botocore connection options
    DYNAMODB_MAX_POOL_CONNECTIONS: int = Field(
        default=50, ge=1, description="Max pooled HTTP connections per client (default 50)"
    )

    # General environment
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    # Automatically load from .env at runtime. The deployment will provide these.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def dynamodb_endpoint_url(self) -> Optional[str]:
        """Endpoint override for DynamoDB, or None to use the regional AWS endpoint."""
        return self.LOCAL_DYNAMODB_ENDPOINT or None


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object for the table and AWS connection."""
    # Settings is cheap to construct; for simplicity, we return a new instance.
    # The table handle in versa_data.db.client is what gets cached.
    return Settings()
