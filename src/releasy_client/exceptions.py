"""Custom exception hierarchy for the Releasy client."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from .models import ErrorBody


class ReleasyError(RuntimeError):
    """Base error for Releasy client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ConfigurationError(ReleasyError):
    """Raised when the client is configured with an unusable base URL."""

    def __init__(self, base_url: str) -> None:
        super().__init__(f"invalid base url: {base_url!r}", details=base_url)
        self.base_url = base_url


class TransportError(ReleasyError):
    """Raised when an HTTP exchange cannot be completed."""


class UnexpectedResponseError(TransportError):
    """Raised when a successful response carries a payload we cannot decode."""


class UploadSourceError(TransportError):
    """Raised when a local artifact cannot be opened for upload."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Unable to open upload source {path}: {reason}", details=reason)
        self.path = path


class ApiError(ReleasyError):
    """Raised when the API answers with a status outside the expected set."""

    def __init__(
        self,
        status: int,
        *,
        error: ErrorBody | None = None,
        body: str | None = None,
    ) -> None:
        if error is not None:
            message = f"api error (status {status}): {error.error.code} ({error.error.message})"
        else:
            message = f"api error (status {status})"
        super().__init__(message, status_code=status, details=body)
        self.status = status
        self.error = error
        self.body = body

    @property
    def code(self) -> str | None:
        return self.error.error.code if self.error else None

    @property
    def message(self) -> str | None:
        return self.error.error.message if self.error else None


class MissingLocationHeaderError(ReleasyError):
    """Raised when a download redirect arrives without a Location header."""

    def __init__(self) -> None:
        super().__init__("missing Location header in redirect response", status_code=302)
