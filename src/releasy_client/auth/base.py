"""Base abstractions for auth strategies."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import ClassVar


class AuthStrategy(ABC):
    """Interface each authentication mechanism must implement.

    A strategy contributes at most one header to an outgoing request. The
    client consults `apply` in exactly one place while preparing headers.
    """

    label: ClassVar[str]

    @abstractmethod
    def apply(self, headers: MutableMapping[str, str]) -> None:
        """Mutate headers in-place with the necessary credentials."""


@dataclass(frozen=True, slots=True)
class NoAuth(AuthStrategy):
    """Send requests without credentials."""

    label: ClassVar[str] = "none"

    def apply(self, headers: MutableMapping[str, str]) -> None:
        return None
