"""
Dependency wiring for scripts and embedding applications.
"""

from __future__ import annotations

from edrs.client import ApiClient
from edrs.config import get_settings
from edrs.session import FileSessionStore, SessionStore
from edrs.storage import StorageProvider, build_storage_provider

_session_store: SessionStore | None = None
_api_client: ApiClient | None = None
_storage_provider: StorageProvider | None = None


def get_session_store() -> SessionStore:
    """
    Return a singleton session store backed by the configured session file.
    """
    global _session_store
    if _session_store:
        return _session_store

    settings = get_settings()
    _session_store = FileSessionStore(settings.session_file)
    return _session_store


def get_api_client() -> ApiClient:
    global _api_client
    if _api_client:
        return _api_client

    _api_client = ApiClient.from_settings(get_settings(), session=get_session_store())
    return _api_client


def get_storage_provider() -> StorageProvider:
    """
    Return the storage provider selected by configuration, built once.
    """
    global _storage_provider
    if _storage_provider:
        return _storage_provider

    _storage_provider = build_storage_provider(get_settings())
    return _storage_provider


def reset_dependencies() -> None:
    global _session_store, _api_client, _storage_provider
    _session_store = None
    _api_client = None
    _storage_provider = None
    get_settings.cache_clear()
