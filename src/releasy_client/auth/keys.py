"""Shared-secret key authentication."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import ClassVar

from .base import AuthStrategy

ADMIN_KEY_HEADER = "x-releasy-admin-key"
API_KEY_HEADER = "x-releasy-api-key"


@dataclass(frozen=True, slots=True)
class AdminKeyAuth(AuthStrategy):
    """Apply the operator-tier admin key."""

    label: ClassVar[str] = "admin-key"

    key: str = field(repr=False)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers[ADMIN_KEY_HEADER] = self.key


@dataclass(frozen=True, slots=True)
class ApiKeyAuth(AuthStrategy):
    """Apply a customer API key."""

    label: ClassVar[str] = "api-key"

    key: str = field(repr=False)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers[API_KEY_HEADER] = self.key
