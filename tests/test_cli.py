import hashlib
import json

import pytest
import typer
from typer.testing import CliRunner

from releasy_client.auth import AdminKeyAuth, ApiKeyAuth, NoAuth, OperatorJWTAuth
from releasy_client.cli import _resolve_auth, app
from releasy_client.cli_schema import CLI_TABLE_VIEWS
from releasy_client.models import HealthResponse

runner = CliRunner()

BASE_URL = "https://releasy.test"
ADMIN = ["--base-url", BASE_URL, "--admin-key", "admin-key"]


def test_health_check_cli(requests_mock):
    matcher = requests_mock.get(f"{BASE_URL}/health", json={"status": "ok"})

    result = runner.invoke(app, ["--base-url", BASE_URL, "health", "check"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"status": "ok"}
    assert "x-releasy-admin-key" not in matcher.last_request.headers


def test_ready_failure_exits_non_zero(requests_mock):
    requests_mock.get(
        f"{BASE_URL}/ready",
        status_code=503,
        json={"error": {"code": "unavailable", "message": "maintenance"}},
    )

    result = runner.invoke(app, ["--base-url", BASE_URL, "health", "ready"])

    assert result.exit_code == 1
    assert "Request failed (status 503)" in result.output
    assert "maintenance" in result.output


def test_customers_list_json(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/v1/admin/customers",
        json={
            "customers": [{"id": "cust-1", "name": "Acme", "created_at": 1700000000}],
            "limit": 50,
            "offset": 0,
        },
    )

    result = runner.invoke(app, [*ADMIN, "customers", "list", "--plan", "pro", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"id": "cust-1", "name": "Acme", "created_at": 1700000000}
    ]
    assert matcher.last_request.headers["x-releasy-admin-key"] == "admin-key"
    assert "plan=pro" in matcher.last_request.url


def test_customers_list_renders_table(requests_mock):
    requests_mock.get(
        f"{BASE_URL}/v1/admin/customers",
        json={
            "customers": [{"id": "cust-1", "name": "Acme", "created_at": 1700000000}],
            "limit": 50,
            "offset": 0,
        },
    )

    result = runner.invoke(app, [*ADMIN, "customers", "list"])

    assert result.exit_code == 0
    assert "Customers" in result.stdout
    assert "Acme" in result.stdout


def test_customers_create_passes_idempotency_key(requests_mock):
    matcher = requests_mock.post(
        f"{BASE_URL}/v1/admin/customers",
        status_code=201,
        json={"id": "cust-2", "name": "Globex", "created_at": 1700000000},
    )

    result = runner.invoke(
        app, [*ADMIN, "customers", "create", "--name", "Globex", "--idempotency-key", "idem-1"]
    )

    assert result.exit_code == 0
    assert matcher.last_request.headers["Idempotency-Key"] == "idem-1"
    assert json.loads(result.stdout)["id"] == "cust-2"


def test_users_reset_credentials(requests_mock):
    matcher = requests_mock.post(
        f"{BASE_URL}/v1/admin/users/user-1/reset-credentials", status_code=202
    )

    result = runner.invoke(app, [*ADMIN, "users", "reset-credentials", "user-1", "--send-email"])

    assert result.exit_code == 0
    assert matcher.last_request.json() == {"send_email": True}
    assert "Credential reset requested" in result.stdout


def test_releases_list_include_artifacts_flag(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/v1/releases", json={"releases": [], "limit": 50, "offset": 0}
    )

    result = runner.invoke(
        app,
        ["--base-url", BASE_URL, "--api-key", "k", "releases", "list", "--no-include-artifacts", "--json"],
    )

    assert result.exit_code == 0
    assert "include_artifacts=false" in matcher.last_request.url
    assert matcher.last_request.headers["x-releasy-api-key"] == "k"


def test_releases_upload_presigns_uploads_and_registers(requests_mock, tmp_path):
    artifact = tmp_path / "app.tar.gz"
    artifact.write_bytes(b"artifact-bytes")
    upload_url = "https://storage.test/bucket/app.tar.gz"
    requests_mock.post(
        f"{BASE_URL}/v1/releases/rel-1/artifacts/presign",
        json={
            "artifact_id": "art-1",
            "object_key": "demo/app.tar.gz",
            "upload_url": upload_url,
            "expires_at": 1700000900,
        },
    )
    upload = requests_mock.put(upload_url, status_code=200)
    register = requests_mock.post(
        f"{BASE_URL}/v1/releases/rel-1/artifacts",
        status_code=201,
        json={
            "id": "art-1",
            "release_id": "rel-1",
            "object_key": "demo/app.tar.gz",
            "checksum": hashlib.sha256(b"artifact-bytes").hexdigest(),
            "size": 14,
            "platform": "linux-x86_64",
            "created_at": 1700000950,
        },
    )

    result = runner.invoke(
        app,
        [*ADMIN, "releases", "upload", "rel-1", str(artifact), "--platform", "linux-x86_64"],
    )

    assert result.exit_code == 0
    assert upload.call_count == 1
    assert register.last_request.json() == {
        "artifact_id": "art-1",
        "object_key": "demo/app.tar.gz",
        "checksum": hashlib.sha256(b"artifact-bytes").hexdigest(),
        "size": 14,
        "platform": "linux-x86_64",
    }


def test_releases_upload_file_removed_mid_command_exits_cleanly(requests_mock, tmp_path):
    artifact = tmp_path / "app.tar.gz"
    artifact.write_bytes(b"artifact-bytes")
    upload_url = "https://storage.test/bucket/app.tar.gz"

    def presign(request, context):
        artifact.unlink()
        return {
            "artifact_id": "art-1",
            "object_key": "demo/app.tar.gz",
            "upload_url": upload_url,
            "expires_at": 1700000900,
        }

    requests_mock.post(f"{BASE_URL}/v1/releases/rel-1/artifacts/presign", json=presign)
    upload = requests_mock.put(upload_url, status_code=200)
    register = requests_mock.post(f"{BASE_URL}/v1/releases/rel-1/artifacts", status_code=201)

    result = runner.invoke(
        app,
        [*ADMIN, "releases", "upload", "rel-1", str(artifact), "--platform", "linux-x86_64"],
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Unable to open upload source" in result.output
    assert upload.call_count == 0
    assert register.call_count == 0


def test_downloads_resolve_prints_location(requests_mock):
    requests_mock.get(
        f"{BASE_URL}/v1/downloads/tok-1",
        status_code=302,
        headers={"Location": "https://example/obj"},
    )

    result = runner.invoke(app, ["--base-url", BASE_URL, "downloads", "resolve", "tok-1"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "https://example/obj"


def test_downloads_resolve_missing_location(requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/downloads/tok-1", status_code=302)

    result = runner.invoke(app, ["--base-url", BASE_URL, "downloads", "resolve", "tok-1"])

    assert result.exit_code == 1
    assert "missing Location header" in result.output


def test_invalid_base_url_is_rejected():
    result = runner.invoke(app, ["--base-url", "ftp://host", "health", "check"])

    assert result.exit_code != 0
    assert "invalid base url" in result.output


def test_cert_with_no_verify_rejected(tmp_path):
    cert = tmp_path / "ca.pem"
    cert.write_text("dummy", encoding="utf-8")

    result = runner.invoke(
        app,
        ["--base-url", BASE_URL, "--cert", str(cert), "--no-verify", "health", "check"],
    )

    assert result.exit_code != 0
    assert "Cannot combine --cert with --no-verify" in result.output


def test_env_configures_client(monkeypatch):
    captured: dict[str, object] = {}

    class DummyClient:
        def __init__(self, **kwargs):
            captured.update(kwargs)
            self.health = type("H", (), {"check": lambda self: HealthResponse(status="ok")})()

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr("releasy_client.cli.ReleasyClient", DummyClient)

    result = runner.invoke(
        app,
        ["health", "check"],
        env={
            "RELEASY_BASE_URL": BASE_URL,
            "RELEASY_API_KEY": "env-key",
            "RELEASY_USER_AGENT": "releasy-cli-tests",
        },
    )

    assert result.exit_code == 0
    assert captured["base_url"] == BASE_URL
    assert captured["auth"] == ApiKeyAuth("env-key")
    assert captured["user_agent"] == "releasy-cli-tests"


@pytest.mark.parametrize(
    "auth, admin_key, api_key, token, expected",
    [
        ("auto", "a", "b", "c", AdminKeyAuth("a")),
        ("auto", None, "b", "c", ApiKeyAuth("b")),
        ("auto", None, None, "c", OperatorJWTAuth("c")),
        ("auto", None, None, None, NoAuth()),
        ("none", "a", None, None, NoAuth()),
        ("API-KEY", "a", "b", None, ApiKeyAuth("b")),
        ("jwt", None, None, "c", OperatorJWTAuth("c")),
    ],
)
def test_resolve_auth(auth, admin_key, api_key, token, expected):
    assert _resolve_auth(auth, admin_key, api_key, token) == expected


@pytest.mark.parametrize("auth", ["admin-key", "api-key", "jwt", "basic"])
def test_resolve_auth_rejects_missing_credentials(auth):
    with pytest.raises(typer.BadParameter):
        _resolve_auth(auth, None, None, None)


def test_release_view_counts_artifacts_right_aligned():
    view = CLI_TABLE_VIEWS["releases.list"]
    artifacts = next(column for column in view.columns if column.header == "Artifacts")
    published = next(column for column in view.columns if column.header == "Published")

    row = {"published_at": None, "artifacts": [{"id": "a"}, {"id": "b"}]}

    assert artifacts.justify == "right"
    assert artifacts.render(row) == "2"
    assert published.justify == "left"
    assert published.render(row) == ""
    assert published.render({"published_at": 0}) == "1970-01-01 00:00:00Z"
