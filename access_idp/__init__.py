"""
Access Identity Provider Client

Access 身份提供商管理 API 的 Python 客户端。
"""

from .models import (
    IdentityProvider,
    ProviderConfiguration,
    ScimConfiguration,
    ProviderType,
    PROVIDER_CONFIG_FIELDS,
    IdentityProviderValidationError,
    IdentityProviderResponse,
    IdentityProviderListResponse,
    ResponseInfo,
)

from .client import (
    APIClient,
    APIClientError,
    RequestError,
    RequestCancelledError,
    DecodeError,
    DEFAULT_API_ENDPOINT,
)
from .identity_providers import IdentityProviderClient
from .pagination import PaginationOptions, ResultInfo, DEFAULT_PER_PAGE
from .resource import ResourceContainer, ResourceContainerError, RouteLevel

__all__ = [
    # Client
    "APIClient",
    "IdentityProviderClient",
    "DEFAULT_API_ENDPOINT",
    # Errors
    "APIClientError",
    "RequestError",
    "RequestCancelledError",
    "DecodeError",
    "IdentityProviderValidationError",
    "ResourceContainerError",
    # Models
    "IdentityProvider",
    "ProviderConfiguration",
    "ScimConfiguration",
    "ProviderType",
    "PROVIDER_CONFIG_FIELDS",
    "IdentityProviderResponse",
    "IdentityProviderListResponse",
    "ResponseInfo",
    # Pagination / container
    "PaginationOptions",
    "ResultInfo",
    "DEFAULT_PER_PAGE",
    "ResourceContainer",
    "RouteLevel",
]
