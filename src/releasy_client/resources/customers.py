"""Customer administration."""

from __future__ import annotations

from ..models import (
    AdminCreateCustomerRequest,
    AdminCreateCustomerResponse,
    AdminCustomerListQuery,
    AdminCustomerListResponse,
    AdminCustomerResponse,
    AdminUpdateCustomerRequest,
)
from .base import ResourceBase, segment


class CustomersResource(ResourceBase):
    """Manage customers (admin key)."""

    def list(self, query: AdminCustomerListQuery | None = None) -> AdminCustomerListResponse:
        return self._get(
            "/v1/admin/customers", AdminCustomerListResponse, query=query or AdminCustomerListQuery()
        )

    def create(self, body: AdminCreateCustomerRequest) -> AdminCreateCustomerResponse:
        return self.create_with_idempotency(body, None)

    def create_with_idempotency(
        self, body: AdminCreateCustomerRequest, idempotency_key: str | None
    ) -> AdminCreateCustomerResponse:
        """Create a customer, letting the server deduplicate on `idempotency_key`.

        Args:
            body: The customer to create.
            idempotency_key: Sent as the ``Idempotency-Key`` header when not None.
        """
        return self._post(
            "/v1/admin/customers",
            body,
            AdminCreateCustomerResponse,
            headers=self._idempotency_headers(idempotency_key),
        )

    def get(self, customer_id: str) -> AdminCustomerResponse:
        return self._get(f"/v1/admin/customers/{segment(customer_id)}", AdminCustomerResponse)

    def update(self, customer_id: str, body: AdminUpdateCustomerRequest) -> AdminCustomerResponse:
        return self._patch(f"/v1/admin/customers/{segment(customer_id)}", body, AdminCustomerResponse)
