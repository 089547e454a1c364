"""Classify Releasy HTTP responses into typed values or structured errors."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from requests import Response

from .exceptions import ApiError, MissingLocationHeaderError, UnexpectedResponseError
from .models import DownloadResolution, ErrorBody, Model

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Model)


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def error_from_response(response: Response) -> ApiError:
    """Build an `ApiError` from a response, tolerating malformed error bodies."""

    body = response.text
    detail: ErrorBody | None
    try:
        detail = ErrorBody.from_dict(json.loads(body))
    except (ValueError, RecursionError):
        detail = None
    logger.debug(
        "Releasy API error status=%s code=%s",
        response.status_code,
        detail.error.code if detail else "unparsed",
    )
    return ApiError(response.status_code, error=detail, body=body or None)


def ensure_success(response: Response) -> None:
    """Raise `ApiError` unless the response carries a 2xx status."""

    if is_success(response.status_code):
        return
    raise error_from_response(response)


def parse_json(response: Response) -> Any:
    """Parse JSON with helpful error context."""

    try:
        return response.json()
    except (ValueError, RecursionError) as exc:
        raise UnexpectedResponseError(
            "Response did not contain valid JSON",
            status_code=response.status_code,
            details=response.text[:200],
        ) from exc


def parse_json_response(response: Response, model: type[M] | None = None) -> Any:
    """Decode a 2xx body as `model` (raw JSON when `model` is None)."""

    ensure_success(response)
    payload = parse_json(response)
    if model is None:
        return payload
    try:
        return model.from_dict(payload)
    except (ValueError, RecursionError) as exc:
        raise UnexpectedResponseError(
            f"Response did not match {model.__name__}: {exc}",
            status_code=response.status_code,
            details=str(exc),
        ) from exc


def parse_empty_response(response: Response, expected_status: int) -> None:
    """Accept exactly `expected_status`; the body is ignored."""

    if response.status_code == expected_status:
        return None
    raise error_from_response(response)


def parse_redirect(response: Response) -> DownloadResolution:
    """Resolve a 302 redirect into its Location."""

    if response.status_code != 302:
        raise error_from_response(response)
    location = response.headers.get("Location")
    if location is None:
        raise MissingLocationHeaderError()
    return DownloadResolution(location=location)
