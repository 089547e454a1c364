"""Configuration helpers for the Releasy client."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ConfigurationError

DEFAULT_HEADERS = {"Accept": "application/json"}


def normalize_base_url(base_url: str) -> str:
    """Trim whitespace and trailing slashes; require an http(s) scheme."""

    trimmed = base_url.strip().rstrip("/")
    if not trimmed:
        raise ConfigurationError(base_url)
    if not trimmed.startswith(("http://", "https://")):
        raise ConfigurationError(base_url)
    return trimmed


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Typed, immutable configuration for `ReleasyClient`.

    `base_url` is expected to be normalized already; use `from_base_url` to
    validate raw input.
    """

    base_url: str
    user_agent: str | None = None
    timeout: float | tuple[float, float] | None = None
    verify_ssl: bool | str = True

    @classmethod
    def from_base_url(
        cls,
        base_url: str,
        *,
        user_agent: str | None = None,
        timeout: float | tuple[float, float] | None = None,
        verify_ssl: bool | str = True,
    ) -> ClientConfig:
        return cls(
            base_url=normalize_base_url(base_url),
            user_agent=user_agent,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )

    def resolved_headers(self) -> dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers
