"""Customer entitlements."""

from __future__ import annotations

from ..models import (
    EntitlementCreateRequest,
    EntitlementListQuery,
    EntitlementListResponse,
    EntitlementResponse,
    EntitlementUpdateRequest,
)
from .base import ResourceBase, segment


class EntitlementsResource(ResourceBase):
    """Grant and revoke product entitlements for a customer (admin key)."""

    def list(
        self, customer_id: str, query: EntitlementListQuery | None = None
    ) -> EntitlementListResponse:
        return self._get(
            self._collection(customer_id),
            EntitlementListResponse,
            query=query or EntitlementListQuery(),
        )

    def create(self, customer_id: str, body: EntitlementCreateRequest) -> EntitlementResponse:
        return self._post(self._collection(customer_id), body, EntitlementResponse)

    def update(
        self, customer_id: str, entitlement_id: str, body: EntitlementUpdateRequest
    ) -> EntitlementResponse:
        path = f"{self._collection(customer_id)}/{segment(entitlement_id)}"
        return self._patch(path, body, EntitlementResponse)

    def delete(self, customer_id: str, entitlement_id: str) -> None:
        path = f"{self._collection(customer_id)}/{segment(entitlement_id)}"
        self._expect_status("DELETE", path, 204)

    @staticmethod
    def _collection(customer_id: str) -> str:
        return f"/v1/admin/customers/{segment(customer_id)}/entitlements"
