"""
Client toolkit for the EDRS document-management backend.

This package provides an API client with an explicit retry/auth-failure
policy, resource services, storage provider configuration and the
connection checks used to verify a deployment.
"""

from edrs.client import ApiClient, ApiConfig, resolve_api_config
from edrs.errors import ApiError, ApiNetworkError, EdrsError, StorageConfigError
from edrs.policy import AuthFailureHandler, RetryPolicy

__all__ = [
    "ApiClient",
    "ApiConfig",
    "ApiError",
    "ApiNetworkError",
    "AuthFailureHandler",
    "EdrsError",
    "RetryPolicy",
    "StorageConfigError",
    "resolve_api_config",
]
