"""
Configuration and settings for the EDRS client toolkit.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRODUCTION_API_URL = "https://edrs-backend-production.up.railway.app"
DEFAULT_DEVELOPMENT_API_URL = "http://localhost:8000"
DEFAULT_FRONTEND_URL = "https://edrs-frontend.vercel.app"


def _env(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class Settings(BaseSettings):
    """Environment-backed settings shared by the client, checks and storage config."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    mode: str = Field(default="development", validation_alias=_env("EDRS_MODE", "MODE"))

    # Backend endpoints
    api_url: str = Field(
        default=DEFAULT_PRODUCTION_API_URL,
        validation_alias=_env("EDRS_API_URL", "VITE_API_URL"),
    )
    dev_api_url: str = Field(
        default=DEFAULT_DEVELOPMENT_API_URL,
        validation_alias=_env("EDRS_DEV_API_URL", "VITE_DEV_API_URL"),
    )
    frontend_url: str = Field(
        default=DEFAULT_FRONTEND_URL, validation_alias=_env("EDRS_FRONTEND_URL")
    )

    # Persisted session (token + cached user)
    session_file: Path = Field(
        default=Path.home() / ".edrs" / "session.json",
        validation_alias=_env("EDRS_SESSION_FILE"),
    )

    # File storage
    storage_provider: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_STORAGE_PROVIDER", "VITE_STORAGE_PROVIDER"),
    )

    # AWS S3 (or any S3-compatible endpoint)
    aws_region: str = Field(
        default="us-east-1", validation_alias=_env("EDRS_AWS_REGION", "VITE_AWS_REGION")
    )
    s3_bucket: str = Field(
        default="edrs-documents", validation_alias=_env("EDRS_S3_BUCKET", "VITE_S3_BUCKET")
    )
    aws_access_key_id: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_AWS_ACCESS_KEY_ID", "VITE_AWS_ACCESS_KEY_ID"),
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_AWS_SECRET_ACCESS_KEY", "VITE_AWS_SECRET_ACCESS_KEY"),
    )
    s3_endpoint: Optional[str] = Field(
        default=None, validation_alias=_env("EDRS_S3_ENDPOINT", "VITE_S3_ENDPOINT")
    )
    s3_force_path_style: bool = Field(
        default=False,
        validation_alias=_env("EDRS_S3_FORCE_PATH_STYLE", "VITE_S3_FORCE_PATH_STYLE"),
    )
    s3_cdn_domain: Optional[str] = Field(
        default=None, validation_alias=_env("EDRS_S3_CDN_DOMAIN", "VITE_S3_CDN_DOMAIN")
    )

    # Google Cloud Storage
    gcp_project_id: Optional[str] = Field(
        default=None, validation_alias=_env("EDRS_GCP_PROJECT_ID", "VITE_GCP_PROJECT_ID")
    )
    gcs_bucket: str = Field(
        default="edrs-documents", validation_alias=_env("EDRS_GCS_BUCKET", "VITE_GCS_BUCKET")
    )
    gcp_key_file: Optional[str] = Field(
        default=None, validation_alias=_env("EDRS_GCP_KEY_FILE", "VITE_GCP_KEY_FILE")
    )
    gcs_cdn_domain: Optional[str] = Field(
        default=None, validation_alias=_env("EDRS_GCS_CDN_DOMAIN", "VITE_GCS_CDN_DOMAIN")
    )

    # Azure Blob Storage
    azure_account_name: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_AZURE_ACCOUNT_NAME", "VITE_AZURE_ACCOUNT_NAME"),
    )
    azure_account_key: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_AZURE_ACCOUNT_KEY", "VITE_AZURE_ACCOUNT_KEY"),
    )
    azure_container: str = Field(
        default="edrs-documents",
        validation_alias=_env("EDRS_AZURE_CONTAINER", "VITE_AZURE_CONTAINER"),
    )
    azure_cdn_domain: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_AZURE_CDN_DOMAIN", "VITE_AZURE_CDN_DOMAIN"),
    )

    # Local storage (development)
    local_upload_path: str = Field(
        default="/uploads",
        validation_alias=_env("EDRS_LOCAL_UPLOAD_PATH", "VITE_LOCAL_UPLOAD_PATH"),
    )
    local_base_url: str = Field(
        default="http://localhost:8001",
        validation_alias=_env("EDRS_LOCAL_BASE_URL", "VITE_LOCAL_BASE_URL"),
    )

    # MinIO (self-hosted, S3-compatible)
    minio_endpoint: str = Field(
        default="http://localhost:9000",
        validation_alias=_env("EDRS_MINIO_ENDPOINT", "VITE_MINIO_ENDPOINT"),
    )
    minio_access_key: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_MINIO_ACCESS_KEY", "VITE_MINIO_ACCESS_KEY"),
    )
    minio_secret_key: Optional[str] = Field(
        default=None,
        validation_alias=_env("EDRS_MINIO_SECRET_KEY", "VITE_MINIO_SECRET_KEY"),
    )
    minio_bucket: str = Field(
        default="edrs-documents",
        validation_alias=_env("EDRS_MINIO_BUCKET", "VITE_MINIO_BUCKET"),
    )
    minio_use_ssl: bool = Field(
        default=False, validation_alias=_env("EDRS_MINIO_USE_SSL", "VITE_MINIO_USE_SSL")
    )

    # Security
    encryption_key: Optional[str] = Field(
        default=None, validation_alias=_env("EDRS_ENCRYPTION_KEY", "VITE_ENCRYPTION_KEY")
    )

    @property
    def is_development(self) -> bool:
        return self.mode == "development"

    @property
    def is_production(self) -> bool:
        return self.mode == "production"

    @property
    def request_timeout(self) -> float:
        # Seconds; longer in production where the backend may be cold-starting.
        return 30.0 if self.is_production else 10.0

    @property
    def max_retries(self) -> int:
        return 3 if self.is_production else 1


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
