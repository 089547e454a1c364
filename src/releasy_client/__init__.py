"""High-level Releasy client entrypoints."""
from .auth import AdminKeyAuth, ApiKeyAuth, AuthStrategy, NoAuth, OperatorJWTAuth
from .client import ReleasyClient
from .config import ClientConfig
from .exceptions import (
    ApiError,
    ConfigurationError,
    MissingLocationHeaderError,
    ReleasyError,
    TransportError,
    UnexpectedResponseError,
    UploadSourceError,
)

__all__ = [
    "ReleasyClient",
    "ClientConfig",
    "AuthStrategy",
    "NoAuth",
    "AdminKeyAuth",
    "ApiKeyAuth",
    "OperatorJWTAuth",
    "ReleasyError",
    "ConfigurationError",
    "TransportError",
    "UnexpectedResponseError",
    "UploadSourceError",
    "ApiError",
    "MissingLocationHeaderError",
]
