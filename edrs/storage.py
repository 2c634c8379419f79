"""
Storage provider configuration for S3, GCS, Azure Blob, MinIO and local files.

These objects only describe where documents live: the upload endpoint the
backend exposes for a provider, the public URL of a stored object and the
validation limits. The actual transfers happen in the backend.
"""

from __future__ import annotations

import hashlib
import random
import string
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Union

from edrs.config import Settings
from edrs.errors import StorageConfigError

GB = 1024 * 1024 * 1024

ALLOWED_TYPES = (
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/tiff",
    "application/acad",
    "application/x-autocad",
    "application/x-dwg",
)

STORAGE_FOLDERS = {
    "documents": "documents",
    "images": "images",
    "processed": "processed",
    "thumbnails": "thumbnails",
    "exports": "exports",
    "temp": "temp",
}

DEFAULT_PROVIDER = "local"


class StorageProvider(Protocol):
    """What the client needs to know about a storage backend."""

    name: str
    max_file_size: int
    allowed_types: tuple[str, ...]

    @property
    def upload_endpoint(self) -> str:
        ...

    def public_url(self, path: str) -> str:
        ...

    def is_file_type_allowed(self, mime_type: str) -> bool:
        ...

    def is_file_size_valid(self, size: int) -> bool:
        ...


class _Limits:
    max_file_size: int
    allowed_types: tuple[str, ...]

    def is_file_type_allowed(self, mime_type: str) -> bool:
        return mime_type in self.allowed_types

    def is_file_size_valid(self, size: int) -> bool:
        return size <= self.max_file_size


def _cdn_url(cdn_domain: Optional[str], path: str) -> Optional[str]:
    if not cdn_domain:
        return None
    domain = cdn_domain.rstrip("/")
    if not domain.startswith(("http://", "https://")):
        domain = f"https://{domain}"
    return f"{domain}/{path.lstrip('/')}"


@dataclass
class S3StorageProvider(_Limits):
    bucket: str
    region: str = "us-east-1"
    endpoint: Optional[str] = None
    force_path_style: bool = False
    cdn_domain: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = field(default=None, repr=False)
    max_file_size: int = 50 * GB
    allowed_types: tuple[str, ...] = ALLOWED_TYPES

    name = "aws-s3"

    @property
    def upload_endpoint(self) -> str:
        return "/api/storage/s3/upload"

    def public_url(self, path: str) -> str:
        path = path.lstrip("/")
        cdn = _cdn_url(self.cdn_domain, path)
        if cdn:
            return cdn
        if self.endpoint and self.force_path_style:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{path}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{path}"


@dataclass
class GcsStorageProvider(_Limits):
    bucket: str
    project_id: Optional[str] = None
    key_file: Optional[str] = None
    cdn_domain: Optional[str] = None
    max_file_size: int = 50 * GB
    allowed_types: tuple[str, ...] = ALLOWED_TYPES

    name = "google-cloud"

    @property
    def upload_endpoint(self) -> str:
        return "/api/storage/gcs/upload"

    def public_url(self, path: str) -> str:
        path = path.lstrip("/")
        return _cdn_url(self.cdn_domain, path) or (
            f"https://storage.googleapis.com/{self.bucket}/{path}"
        )


@dataclass
class AzureBlobStorageProvider(_Limits):
    account_name: str
    container_name: str = "edrs-documents"
    account_key: Optional[str] = field(default=None, repr=False)
    cdn_domain: Optional[str] = None
    max_file_size: int = int(4.75 * 1024 * GB)
    allowed_types: tuple[str, ...] = ALLOWED_TYPES

    name = "azure-blob"

    @property
    def upload_endpoint(self) -> str:
        return "/api/storage/azure/upload"

    def public_url(self, path: str) -> str:
        path = path.lstrip("/")
        return _cdn_url(self.cdn_domain, path) or (
            f"https://{self.account_name}.blob.core.windows.net/"
            f"{self.container_name}/{path}"
        )


@dataclass
class LocalStorageProvider(_Limits):
    base_url: str = "http://localhost:8001"
    upload_path: str = "/uploads"
    max_file_size: int = 100 * 1024 * 1024
    allowed_types: tuple[str, ...] = ALLOWED_TYPES

    name = "local"

    @property
    def upload_endpoint(self) -> str:
        return "/api/storage/local/upload"

    def public_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/media/{path.lstrip('/')}"


@dataclass
class MinioStorageProvider(_Limits):
    endpoint: str = "http://localhost:9000"
    bucket: str = "edrs-documents"
    access_key: Optional[str] = None
    secret_key: Optional[str] = field(default=None, repr=False)
    use_ssl: bool = False
    max_file_size: int = 50 * GB
    allowed_types: tuple[str, ...] = ALLOWED_TYPES

    name = "minio"

    @property
    def upload_endpoint(self) -> str:
        return "/api/storage/minio/upload"

    def public_url(self, path: str) -> str:
        endpoint = self.endpoint.rstrip("/")
        if self.use_ssl and endpoint.startswith("http://"):
            endpoint = "https://" + endpoint[len("http://"):]
        return f"{endpoint}/{self.bucket}/{path.lstrip('/')}"


def _build_s3(settings: Settings) -> StorageProvider:
    return S3StorageProvider(
        bucket=settings.s3_bucket,
        region=settings.aws_region,
        endpoint=settings.s3_endpoint,
        force_path_style=settings.s3_force_path_style,
        cdn_domain=settings.s3_cdn_domain,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
    )


def _build_gcs(settings: Settings) -> StorageProvider:
    return GcsStorageProvider(
        bucket=settings.gcs_bucket,
        project_id=settings.gcp_project_id,
        key_file=settings.gcp_key_file,
        cdn_domain=settings.gcs_cdn_domain,
    )


def _build_azure(settings: Settings) -> StorageProvider:
    if not settings.azure_account_name:
        raise StorageConfigError("azure-blob storage requires EDRS_AZURE_ACCOUNT_NAME")
    return AzureBlobStorageProvider(
        account_name=settings.azure_account_name,
        container_name=settings.azure_container,
        account_key=settings.azure_account_key,
        cdn_domain=settings.azure_cdn_domain,
    )


def _build_local(settings: Settings) -> StorageProvider:
    return LocalStorageProvider(
        base_url=settings.local_base_url,
        upload_path=settings.local_upload_path,
    )


def _build_minio(settings: Settings) -> StorageProvider:
    return MinioStorageProvider(
        endpoint=settings.minio_endpoint,
        bucket=settings.minio_bucket,
        access_key=settings.minio_access_key,
        secret_key=settings.minio_secret_key,
        use_ssl=settings.minio_use_ssl,
    )


_BUILDERS = {
    "aws-s3": _build_s3,
    "google-cloud": _build_gcs,
    "azure-blob": _build_azure,
    "local": _build_local,
    "minio": _build_minio,
}

PROVIDER_NAMES = tuple(_BUILDERS)


def build_storage_provider(settings: Settings, name: Optional[str] = None) -> StorageProvider:
    """Construct the provider named by ``name`` or by the settings (default: local)."""
    name = name or settings.storage_provider or DEFAULT_PROVIDER
    builder = _BUILDERS.get(name)
    if builder is None:
        raise StorageConfigError(
            f"Unsupported storage provider: {name} (expected one of {', '.join(PROVIDER_NAMES)})"
        )
    return builder(settings)


def generate_unique_file_name(original_name: str) -> str:
    """``report.pdf`` -> ``report_<epoch-ms>_<random>.pdf``."""
    stem, dot, extension = original_name.rpartition(".")
    if not dot or not stem:
        stem, extension = original_name, ""
    suffix = "".join(random.choices(string.digits + string.ascii_lowercase, k=13))
    unique = f"{stem}_{int(time.time() * 1000)}_{suffix}"
    return f"{unique}.{extension}" if extension else unique


def storage_path(file_name: str, folder: str = "documents") -> str:
    return f"{STORAGE_FOLDERS.get(folder, folder)}/{file_name}"


def calculate_checksum(source: Union[bytes, str, Path], chunk_size: int = 1024 * 1024) -> str:
    """SHA-256 hex digest of raw bytes or of a file on disk."""
    digest = hashlib.sha256()
    if isinstance(source, bytes):
        digest.update(source)
        return digest.hexdigest()
    with open(source, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()
