"""Operator JWT bearer token authentication."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import ClassVar

from .base import AuthStrategy


@dataclass(frozen=True, slots=True)
class OperatorJWTAuth(AuthStrategy):
    """Apply an already issued operator bearer token."""

    label: ClassVar[str] = "operator-jwt"

    token: str = field(repr=False)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers["Authorization"] = f"Bearer {self.token}"
