"""Common helpers for resource wrappers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

from ..http import parse_empty_response, parse_json_response
from ..models import Model, Query

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import ReleasyClient

M = TypeVar("M", bound=Model)

IDEMPOTENCY_HEADER = "Idempotency-Key"


def segment(value: str) -> str:
    """Percent-encode `value` as a single path segment."""

    return quote(str(value), safe="")


class ResourceBase:
    """Provide shared helpers for resource modules."""

    def __init__(self, client: ReleasyClient) -> None:
        self._client = client

    def _get(self, path: str, model: type[M] | None, *, query: Query | None = None) -> Any:
        params = query.to_params() if query is not None else None
        response = self._client.request("GET", path, params=params)
        return parse_json_response(response, model)

    def _send_json(
        self,
        method: str,
        path: str,
        body: Model,
        model: type[M],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> M:
        response = self._client.request(method, path, json_payload=body.to_dict(), headers=headers)
        return parse_json_response(response, model)

    def _post(
        self,
        path: str,
        body: Model,
        model: type[M],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> M:
        return self._send_json("POST", path, body, model, headers=headers)

    def _post_empty(self, path: str, model: type[M]) -> M:
        response = self._client.request("POST", path, data_payload=b"")
        return parse_json_response(response, model)

    def _patch(self, path: str, body: Model, model: type[M]) -> M:
        return self._send_json("PATCH", path, body, model)

    def _put(self, path: str, body: Model, model: type[M]) -> M:
        return self._send_json("PUT", path, body, model)

    def _expect_status(
        self,
        method: str,
        path: str,
        expected_status: int,
        *,
        body: Model | None = None,
    ) -> None:
        payload = body.to_dict() if body is not None else None
        response = self._client.request(method, path, json_payload=payload)
        parse_empty_response(response, expected_status)

    @staticmethod
    def _idempotency_headers(idempotency_key: str | None) -> dict[str, str] | None:
        if idempotency_key is None:
            return None
        return {IDEMPOTENCY_HEADER: idempotency_key}
