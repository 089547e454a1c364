"""API key lifecycle and introspection."""

from __future__ import annotations

from ..models import (
    AdminCreateKeyRequest,
    AdminCreateKeyResponse,
    AdminRevokeKeyRequest,
    AdminRevokeKeyResponse,
    ApiKeyIntrospection,
)
from .base import ResourceBase


class ApiKeysResource(ResourceBase):
    """Issue and revoke API keys (admin key) and introspect the active one (API key)."""

    def create(self, body: AdminCreateKeyRequest) -> AdminCreateKeyResponse:
        return self._post("/v1/admin/keys", body, AdminCreateKeyResponse)

    def revoke(self, body: AdminRevokeKeyRequest) -> AdminRevokeKeyResponse:
        return self._post("/v1/admin/keys/revoke", body, AdminRevokeKeyResponse)

    def introspect(self) -> ApiKeyIntrospection:
        return self._post_empty("/v1/auth/introspect", ApiKeyIntrospection)
