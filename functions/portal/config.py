"""
Configuration and settings for the submission portal.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="")
    log_level: str = Field(default="INFO")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="PORTAL_USE_IN_MEMORY_BACKENDS"
    )

    # Password hashing
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Uploaded blobs
    upload_dir: str = Field(default="uploads")
    upload_url_prefix: str = Field(default="/uploads")
    public_base_url: str = Field(default="http://localhost:3000")
    max_upload_files: int = Field(default=10, ge=1)

    cors_origins: list[str] = Field(default=["http://localhost:3001"])

    # S3-compatible storage (Tencent COS)
    cos_endpoint: Optional[str] = Field(default=None, alias="COS_ENDPOINT")
    cos_region: Optional[str] = Field(default=None, alias="COS_REGION")
    cos_bucket: Optional[str] = Field(default=None, alias="COS_BUCKET")
    aws_access_key_id: Optional[str] = Field(
        default=None, alias="AWS_ACCESS_KEY_ID"
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None, alias="AWS_SECRET_ACCESS_KEY"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
