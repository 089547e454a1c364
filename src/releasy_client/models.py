"""Wire records exchanged with the Releasy API.

Every record is a frozen dataclass. Optional fields use ``None`` to mean
"absent": they are left out of request bodies and query strings entirely and
may be missing (or ``null``) in responses. Required response fields must be
present with the expected primitive type, otherwise decoding fails with
``ValueError``.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, TypeVar

M = TypeVar("M", bound="Model")

_HINTS: dict[type, dict[str, Any]] = {}


class Model:
    """Shared JSON encode/decode behaviour for wire records."""

    __slots__ = ()

    @classmethod
    def from_dict(cls: type[M], payload: Any) -> M:
        if not isinstance(payload, Mapping):
            raise ValueError(f"{cls.__name__} expects a JSON object, got {type(payload).__name__}")
        hints = _type_hints(cls)
        values: dict[str, Any] = {}
        for field in fields(cls):  # type: ignore[arg-type]
            hint = hints[field.name]
            raw = payload.get(field.name)
            if raw is None:
                if not _is_optional(hint):
                    raise ValueError(f"{cls.__name__}.{field.name} is required")
                values[field.name] = None
                continue
            values[field.name] = _decode(hint, raw, f"{cls.__name__}.{field.name}")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for field in fields(self):  # type: ignore[arg-type]
            value = getattr(self, field.name)
            if value is None:
                continue
            payload[field.name] = _encode(value)
        return payload


class Query(Model):
    """A filter record rendered as query-string parameters."""

    __slots__ = ()

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for field in fields(self):  # type: ignore[arg-type]
            value = getattr(self, field.name)
            if value is None:
                continue
            params[field.name] = _encode_param(value)
        return params


def _type_hints(cls: type) -> dict[str, Any]:
    hints = _HINTS.get(cls)
    if hints is None:
        hints = typing.get_type_hints(cls)
        _HINTS[cls] = hints
    return hints


def _is_optional(hint: Any) -> bool:
    if hint is Any:
        return True
    return typing.get_origin(hint) in (typing.Union, types.UnionType) and type(None) in typing.get_args(hint)


def _decode(hint: Any, value: Any, where: str) -> Any:
    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        candidates = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        return _decode(candidates[0], value, where)
    if hint is Any:
        return value
    if origin is list:
        if not isinstance(value, list):
            raise ValueError(f"{where} expects a list, got {type(value).__name__}")
        (item_hint,) = typing.get_args(hint)
        return [_decode(item_hint, item, f"{where}[{index}]") for index, item in enumerate(value)]
    if isinstance(hint, type) and issubclass(hint, Model):
        return hint.from_dict(value)
    if hint is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{where} expects a boolean, got {value!r}")
        return value
    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{where} expects an integer, got {value!r}")
        return value
    if hint is str:
        if not isinstance(value, str):
            raise ValueError(f"{where} expects a string, got {value!r}")
        return value
    return value


def _encode(value: Any) -> Any:
    if isinstance(value, Model):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def _encode_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# Health -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HealthResponse(Model):
    status: str


@dataclass(frozen=True, slots=True)
class ErrorDetail(Model):
    code: str
    message: str


@dataclass(frozen=True, slots=True)
class ErrorBody(Model):
    """Canonical error envelope: ``{"error": {"code": ..., "message": ...}}``."""

    error: ErrorDetail


# Customers ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AdminCreateCustomerRequest(Model):
    name: str
    plan: str | None = None


@dataclass(frozen=True, slots=True)
class AdminCreateCustomerResponse(Model):
    id: str
    name: str
    created_at: int
    plan: str | None = None


@dataclass(frozen=True, slots=True)
class AdminCustomerListQuery(Query):
    customer_id: str | None = None
    name: str | None = None
    plan: str | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class AdminCustomerResponse(Model):
    id: str
    name: str
    created_at: int
    plan: str | None = None
    suspended_at: int | None = None


@dataclass(frozen=True, slots=True)
class AdminCustomerListResponse(Model):
    customers: list[AdminCustomerResponse]
    limit: int
    offset: int


@dataclass(frozen=True, slots=True)
class AdminUpdateCustomerRequest(Model):
    name: str | None = None
    plan: str | None = None
    suspended: bool | None = None


# Users --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UserListQuery(Query):
    customer_id: str | None = None
    email: str | None = None
    status: str | None = None
    keycloak_user_id: str | None = None
    created_from: int | None = None
    created_to: int | None = None
    limit: int | None = None
    cursor: str | None = None


@dataclass(frozen=True, slots=True)
class UserResponse(Model):
    id: str
    keycloak_user_id: str
    customer_id: str
    email: str
    status: str
    groups: list[str]
    created_at: int
    updated_at: int
    disabled_at: int | None = None
    display_name: str | None = None
    last_synced_at: int | None = None
    metadata: Any | None = None


@dataclass(frozen=True, slots=True)
class UserListResponse(Model):
    users: list[UserResponse]
    next_cursor: str | None = None


@dataclass(frozen=True, slots=True)
class UserCreateRequest(Model):
    email: str
    customer_id: str
    display_name: str | None = None
    groups: list[str] | None = None
    metadata: Any | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class UserPatchRequest(Model):
    display_name: str | None = None
    groups: list[str] | None = None
    metadata: Any | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class UserGroupsReplaceRequest(Model):
    groups: list[str]


@dataclass(frozen=True, slots=True)
class ResetCredentialsRequest(Model):
    send_email: bool | None = None


# API keys -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AdminCreateKeyRequest(Model):
    customer_id: str
    expires_at: int | None = None
    key_type: str | None = None
    name: str | None = None
    scopes: list[str] | None = None


@dataclass(frozen=True, slots=True)
class AdminCreateKeyResponse(Model):
    api_key_id: str
    api_key: str
    customer_id: str
    key_type: str
    scopes: list[str]
    expires_at: int | None = None


@dataclass(frozen=True, slots=True)
class AdminRevokeKeyRequest(Model):
    api_key_id: str


@dataclass(frozen=True, slots=True)
class AdminRevokeKeyResponse(Model):
    api_key_id: str


@dataclass(frozen=True, slots=True)
class ApiKeyIntrospection(Model):
    active: bool
    api_key_id: str
    customer_id: str
    key_type: str
    scopes: list[str]
    expires_at: int | None = None


# Artifacts ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ArtifactPresignRequest(Model):
    filename: str
    platform: str


@dataclass(frozen=True, slots=True)
class ArtifactPresignResponse(Model):
    artifact_id: str
    object_key: str
    upload_url: str
    expires_at: int


@dataclass(frozen=True, slots=True)
class ArtifactRegisterRequest(Model):
    artifact_id: str
    object_key: str
    checksum: str
    size: int
    platform: str


@dataclass(frozen=True, slots=True)
class ArtifactRegisterResponse(Model):
    id: str
    release_id: str
    object_key: str
    checksum: str
    size: int
    platform: str
    created_at: int


@dataclass(frozen=True, slots=True)
class ArtifactSummary(Model):
    id: str
    object_key: str
    platform: str
    checksum: str
    size: int


# Audit events -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AuditEventListQuery(Query):
    customer_id: str | None = None
    actor: str | None = None
    event: str | None = None
    created_from: int | None = None
    created_to: int | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class AuditEventResponse(Model):
    id: str
    actor: str
    event: str
    created_at: int
    customer_id: str | None = None
    payload: Any | None = None


@dataclass(frozen=True, slots=True)
class AuditEventListResponse(Model):
    events: list[AuditEventResponse]
    limit: int
    offset: int


# Downloads ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DownloadTokenRequest(Model):
    artifact_id: str
    expires_in_seconds: int | None = None
    purpose: str | None = None


@dataclass(frozen=True, slots=True)
class DownloadTokenResponse(Model):
    download_url: str
    expires_at: int


@dataclass(frozen=True, slots=True)
class DownloadResolution:
    """Final object location reported by a download redirect."""

    location: str


# Entitlements -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EntitlementCreateRequest(Model):
    product: str
    starts_at: int
    ends_at: int | None = None
    metadata: Any | None = None


@dataclass(frozen=True, slots=True)
class EntitlementUpdateRequest(Model):
    product: str | None = None
    starts_at: int | None = None
    ends_at: int | None = None
    metadata: Any | None = None


@dataclass(frozen=True, slots=True)
class EntitlementResponse(Model):
    id: str
    customer_id: str
    product: str
    starts_at: int
    ends_at: int | None = None
    metadata: Any | None = None


@dataclass(frozen=True, slots=True)
class EntitlementListQuery(Query):
    product: str | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class EntitlementListResponse(Model):
    entitlements: list[EntitlementResponse]
    limit: int
    offset: int


# Releases -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReleaseCreateRequest(Model):
    product: str
    version: str


@dataclass(frozen=True, slots=True)
class ReleaseResponse(Model):
    id: str
    product: str
    version: str
    status: str
    created_at: int
    published_at: int | None = None
    artifacts: list[ArtifactSummary] | None = None


@dataclass(frozen=True, slots=True)
class ReleaseListQuery(Query):
    product: str | None = None
    version: str | None = None
    status: str | None = None
    include_artifacts: bool | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class ReleaseListResponse(Model):
    releases: list[ReleaseResponse]
    limit: int
    offset: int
