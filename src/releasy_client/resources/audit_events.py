"""Audit trail queries."""

from __future__ import annotations

from ..models import AuditEventListQuery, AuditEventListResponse
from .base import ResourceBase


class AuditEventsResource(ResourceBase):
    """Read the admin audit log."""

    def list(self, query: AuditEventListQuery | None = None) -> AuditEventListResponse:
        return self._get(
            "/v1/admin/audit-events", AuditEventListResponse, query=query or AuditEventListQuery()
        )
