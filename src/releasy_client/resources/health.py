"""Service health and schema endpoints."""

from __future__ import annotations

from typing import Any

from ..models import HealthResponse
from .base import ResourceBase


class HealthResource(ResourceBase):
    """Probe liveness/readiness; these endpoints need no credentials."""

    def openapi_json(self) -> Any:
        return self._get("/openapi.json", None)

    def check(self) -> HealthResponse:
        return self._get("/health", HealthResponse)

    def live(self) -> HealthResponse:
        return self._get("/live", HealthResponse)

    def ready(self) -> HealthResponse:
        return self._get("/ready", HealthResponse)
