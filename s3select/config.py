"""
Configuration settings for the S3 Select demo.

Uses Pydantic Settings to load environment variables for object store access,
logging, and demo defaults. Credentials are optional: when the key pair is not
set, boto3 falls back to its default credential chain.
"""
from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BUCKET_PREFIX = "amazon-s3-select-"


def default_bucket_name() -> str:
    """Bucket name for today's run, e.g. ``amazon-s3-select-20261019``."""
    return BUCKET_PREFIX + date.today().strftime("%Y%m%d")


class Settings(BaseSettings):
    # Object store
    aws_access_key_id: Optional[str] = Field(None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(None, alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field("us-east-1", alias="AWS_REGION")
    aws_endpoint_url: Optional[str] = Field(None, alias="AWS_ENDPOINT_URL")
    bucket_name: str = Field(default_factory=default_bucket_name, alias="S3_BUCKET")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Demo defaults
    employee_count: int = Field(100_000, alias="EMPLOYEE_COUNT")
    employee_min_age: int = Field(21, alias="EMPLOYEE_MIN_AGE")
    employee_max_age: int = Field(58, alias="EMPLOYEE_MAX_AGE")
    query_age_threshold: int = Field(50, alias="QUERY_AGE_THRESHOLD")
    query_limit: int = Field(5, alias="QUERY_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["BUCKET_PREFIX", "Settings", "default_bucket_name", "get_settings"]
