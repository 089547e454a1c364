from urllib.parse import parse_qs, urlsplit

import pytest

from releasy_client import AdminKeyAuth, ApiError, ApiKeyAuth, NoAuth, ReleasyClient
from releasy_client.models import (
    AdminCreateKeyRequest,
    AdminRevokeKeyRequest,
    AuditEventListQuery,
    DownloadTokenRequest,
    EntitlementCreateRequest,
    EntitlementListQuery,
    EntitlementUpdateRequest,
)

BASE_URL = "https://releasy.test"
ENTITLEMENT = {
    "id": "ent-1",
    "customer_id": "cust-1",
    "product": "demo",
    "starts_at": 1700000000,
}


def build_client(auth=None):
    return ReleasyClient(base_url=BASE_URL, auth=auth or AdminKeyAuth("admin-key"))


def query_of(request):
    return {key: values[0] for key, values in parse_qs(urlsplit(request.url).query).items()}


@pytest.mark.parametrize("probe, path", [("check", "/health"), ("live", "/live"), ("ready", "/ready")])
def test_health_probes_need_no_credentials(requests_mock, probe, path):
    matcher = requests_mock.get(f"{BASE_URL}{path}", json={"status": "ok"})

    result = getattr(build_client(NoAuth()).health, probe)()

    assert result.status == "ok"
    assert "x-releasy-admin-key" not in matcher.last_request.headers
    assert "Authorization" not in matcher.last_request.headers


def test_list_entitlements_with_filters(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/v1/admin/customers/cust-1/entitlements",
        json={"entitlements": [ENTITLEMENT], "limit": 10, "offset": 0},
    )

    response = build_client().entitlements.list(
        "cust-1", EntitlementListQuery(product="demo", limit=10, offset=0)
    )

    assert query_of(matcher.last_request) == {"product": "demo", "limit": "10", "offset": "0"}
    assert response.entitlements[0].product == "demo"
    assert response.entitlements[0].ends_at is None


def test_create_entitlement_round_trips_populated_fields(requests_mock):
    def echo(request, context):
        context.status_code = 201
        return {"id": "ent-2", "customer_id": "cust-1", **request.json()}

    matcher = requests_mock.post(f"{BASE_URL}/v1/admin/customers/cust-1/entitlements", json=echo)
    body = EntitlementCreateRequest(
        product="demo", starts_at=1700000000, ends_at=1800000000, metadata={"seats": 5}
    )

    created = build_client().entitlements.create("cust-1", body)

    assert matcher.last_request.json() == {
        "product": "demo",
        "starts_at": 1700000000,
        "ends_at": 1800000000,
        "metadata": {"seats": 5},
    }
    assert (created.product, created.starts_at, created.ends_at, created.metadata) == (
        body.product,
        body.starts_at,
        body.ends_at,
        body.metadata,
    )


def test_update_entitlement(requests_mock):
    matcher = requests_mock.patch(
        f"{BASE_URL}/v1/admin/customers/cust-1/entitlements/ent-1",
        json={**ENTITLEMENT, "ends_at": 1900000000},
    )

    response = build_client().entitlements.update(
        "cust-1", "ent-1", EntitlementUpdateRequest(ends_at=1900000000)
    )

    assert matcher.last_request.json() == {"ends_at": 1900000000}
    assert response.ends_at == 1900000000


def test_delete_entitlement_expects_204(requests_mock):
    matcher = requests_mock.delete(
        f"{BASE_URL}/v1/admin/customers/cust-1/entitlements/ent-1", status_code=204
    )

    assert build_client().entitlements.delete("cust-1", "ent-1") is None
    assert matcher.call_count == 1


def test_delete_entitlement_conflict(requests_mock):
    requests_mock.delete(
        f"{BASE_URL}/v1/admin/customers/cust-1/entitlements/ent-1",
        status_code=409,
        json={"error": {"code": "conflict", "message": "in use"}},
    )

    with pytest.raises(ApiError) as excinfo:
        build_client().entitlements.delete("cust-1", "ent-1")

    assert excinfo.value.status == 409
    assert excinfo.value.code == "conflict"


def test_list_audit_events(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/v1/admin/audit-events",
        json={
            "events": [
                {
                    "id": "evt-1",
                    "actor": "admin",
                    "event": "customer.created",
                    "created_at": 1700000000,
                    "customer_id": "cust-1",
                    "payload": {"name": "Acme"},
                }
            ],
            "limit": 5,
            "offset": 0,
        },
    )
    query = AuditEventListQuery(
        customer_id="cust-1",
        actor="admin",
        event="customer.created",
        created_from=1690000000,
        created_to=1710000000,
        limit=5,
        offset=0,
    )

    response = build_client().audit_events.list(query)

    assert query_of(matcher.last_request) == {
        "customer_id": "cust-1",
        "actor": "admin",
        "event": "customer.created",
        "created_from": "1690000000",
        "created_to": "1710000000",
        "limit": "5",
        "offset": "0",
    }
    assert response.events[0].payload == {"name": "Acme"}


def test_create_and_revoke_api_keys(requests_mock):
    create = requests_mock.post(
        f"{BASE_URL}/v1/admin/keys",
        status_code=201,
        json={
            "api_key_id": "key-1",
            "api_key": "rk_live_123",
            "customer_id": "cust-1",
            "key_type": "ci",
            "scopes": ["releases:read"],
        },
    )
    revoke = requests_mock.post(f"{BASE_URL}/v1/admin/keys/revoke", json={"api_key_id": "key-1"})
    client = build_client()

    created = client.keys.create(
        AdminCreateKeyRequest(customer_id="cust-1", key_type="ci", scopes=["releases:read"])
    )
    revoked = client.keys.revoke(AdminRevokeKeyRequest(api_key_id=created.api_key_id))

    assert create.last_request.json() == {
        "customer_id": "cust-1",
        "key_type": "ci",
        "scopes": ["releases:read"],
    }
    assert created.expires_at is None
    assert revoke.last_request.json() == {"api_key_id": "key-1"}
    assert revoked.api_key_id == "key-1"


def test_introspect_sends_empty_body_with_api_key(requests_mock):
    matcher = requests_mock.post(
        f"{BASE_URL}/v1/auth/introspect",
        json={
            "active": True,
            "api_key_id": "key-1",
            "customer_id": "cust-1",
            "key_type": "ci",
            "scopes": [],
            "expires_at": 1800000000,
        },
    )

    result = build_client(ApiKeyAuth("test-key")).keys.introspect()

    request = matcher.last_request
    assert not request.body
    assert request.headers["Content-Length"] == "0"
    assert request.headers["x-releasy-api-key"] == "test-key"
    assert result.active is True
    assert result.expires_at == 1800000000


def test_create_download_token(requests_mock):
    matcher = requests_mock.post(
        f"{BASE_URL}/v1/downloads/token",
        json={"download_url": f"{BASE_URL}/v1/downloads/tok-1", "expires_at": 1700000600},
    )

    response = build_client(ApiKeyAuth("test-key")).downloads.create_token(
        DownloadTokenRequest(artifact_id="art-1", expires_in_seconds=600)
    )

    assert matcher.last_request.json() == {"artifact_id": "art-1", "expires_in_seconds": 600}
    assert response.download_url.endswith("/v1/downloads/tok-1")
