"""
Library Configuration
Centralized configuration management using Pydantic Settings
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables"""

    LOG_LEVEL: str = "INFO"

    # AWS Athena
    AWS_REGION: str = "us-east-1"
    ATHENA_DATABASE: str = "default"
    ATHENA_CATALOG: str = "AwsDataCatalog"
    ATHENA_WORKGROUP: str = "primary"
    ATHENA_S3_OUTPUT_LOCATION: Optional[str] = None

    # Polling and retries
    POLL_INTERVAL_MS: int = 200
    TRANSIENT_RETRY_DELAY_MS: int = 2000
    MAX_RETRIES: Optional[int] = None
    MAX_RETRY_DURATION_SECONDS: Optional[float] = None

    # Result formatting
    FORMAT_JSON: bool = True
    IGNORE_EMPTY_LINES: bool = True
    FLATTEN_NESTED_KEYS: bool = False
    GET_STATS: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("ATHENA_S3_OUTPUT_LOCATION")
    @classmethod
    def validate_output_location(cls, v: Optional[str]) -> Optional[str]:
        if v and not v.startswith("s3://"):
            raise ValueError(f"ATHENA_S3_OUTPUT_LOCATION must be a valid S3 path. Got: {v}")
        return v or None

    @field_validator("POLL_INTERVAL_MS", "TRANSIENT_RETRY_DELAY_MS")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Intervals must not be negative")
        return v


# Global settings instance
settings = Settings()
