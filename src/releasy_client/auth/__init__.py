"""Authentication strategies for Releasy."""
from .base import AuthStrategy, NoAuth
from .jwt import OperatorJWTAuth
from .keys import ADMIN_KEY_HEADER, API_KEY_HEADER, AdminKeyAuth, ApiKeyAuth

__all__ = [
    "ADMIN_KEY_HEADER",
    "API_KEY_HEADER",
    "AuthStrategy",
    "NoAuth",
    "AdminKeyAuth",
    "ApiKeyAuth",
    "OperatorJWTAuth",
]
