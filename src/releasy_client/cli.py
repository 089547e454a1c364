"""Command-line interface for the Releasy release-management API."""
from __future__ import annotations

import hashlib
import json
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from . import ReleasyClient
from .auth import AdminKeyAuth, ApiKeyAuth, AuthStrategy, NoAuth, OperatorJWTAuth
from .cli_schema import CLI_TABLE_VIEWS, TableView
from .exceptions import ApiError, ReleasyError
from .models import (
    AdminCreateCustomerRequest,
    AdminCustomerListQuery,
    ArtifactPresignRequest,
    ArtifactRegisterRequest,
    AuditEventListQuery,
    DownloadTokenRequest,
    EntitlementListQuery,
    ReleaseCreateRequest,
    ReleaseListQuery,
    ResetCredentialsRequest,
    UserListQuery,
)

app = typer.Typer(help="Releasy release-management CLI.", no_args_is_help=True)

health_app = typer.Typer(help="Service health probes.")
customers_app = typer.Typer(help="Customer administration.")
users_app = typer.Typer(help="User administration.")
entitlements_app = typer.Typer(help="Customer entitlements.")
audit_app = typer.Typer(help="Audit log queries.")
releases_app = typer.Typer(help="Release and artifact operations.")
downloads_app = typer.Typer(help="Download tokens.")
app.add_typer(health_app, name="health")
app.add_typer(customers_app, name="customers")
app.add_typer(users_app, name="users")
app.add_typer(entitlements_app, name="entitlements")
app.add_typer(audit_app, name="audit")
app.add_typer(releases_app, name="releases")
app.add_typer(downloads_app, name="downloads")

AUTH_CHOICES = {"auto", "none", "admin-key", "api-key", "jwt"}


def _resolve_auth(
    auth: str,
    admin_key: str | None,
    api_key: str | None,
    token: str | None,
) -> AuthStrategy:
    auth = auth.lower()
    if auth not in AUTH_CHOICES:
        raise typer.BadParameter("--auth must be one of: " + ", ".join(sorted(AUTH_CHOICES)))

    if auth == "auto":
        if admin_key:
            return AdminKeyAuth(admin_key)
        if api_key:
            return ApiKeyAuth(api_key)
        if token:
            return OperatorJWTAuth(token)
        return NoAuth()
    if auth == "admin-key":
        if not admin_key:
            raise typer.BadParameter("--admin-key is required when --auth admin-key is selected.")
        return AdminKeyAuth(admin_key)
    if auth == "api-key":
        if not api_key:
            raise typer.BadParameter("--api-key is required when --auth api-key is selected.")
        return ApiKeyAuth(api_key)
    if auth == "jwt":
        if not token:
            raise typer.BadParameter("--token is required when --auth jwt is selected.")
        return OperatorJWTAuth(token)
    return NoAuth()


def _build_client(
    base_url: str,
    auth: str,
    admin_key: str | None,
    api_key: str | None,
    token: str | None,
    user_agent: str | None,
    verify_ssl: bool,
    cert_path: Path | None,
    timeout: float,
) -> ReleasyClient:
    strategy = _resolve_auth(auth, admin_key, api_key, token)

    verify_target: bool | str
    if cert_path:
        expanded_cert = cert_path.expanduser()
        if not expanded_cert.exists():
            raise typer.BadParameter("Certificate file not found for --cert option.")
        if not verify_ssl:
            raise typer.BadParameter("Cannot combine --cert with --no-verify.")
        verify_target = str(expanded_cert)
    else:
        verify_target = verify_ssl

    try:
        return ReleasyClient(
            base_url=base_url,
            auth=strategy,
            user_agent=user_agent,
            timeout=timeout,
            verify_ssl=verify_target,
        )
    except ReleasyError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


console = Console(force_terminal=False, color_system=None)


def _render_rich_table(view: TableView, rows: Sequence[Mapping[str, Any]]) -> None:
    table = Table(
        title=view.title,
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    for column in view.columns:
        table.add_column(column.header, justify=column.justify)
    ordered_rows = list(rows)
    if view.sort_key:
        ordered_rows.sort(key=view.sort_key)
    for row in ordered_rows:
        table.add_row(*(column.render(row) for column in view.columns))
    console.print(table)


def _present_output(payload: Any, *, view_id: str | None, json_output: bool) -> None:
    if json_output or view_id is None:
        _echo_json(payload)
        return
    view = CLI_TABLE_VIEWS.get(view_id)
    if not view:
        _echo_json(payload)
        return
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        _echo_json(payload)
        return
    rows = [item for item in payload if isinstance(item, Mapping)]
    if not rows:
        _echo_json(payload)
        return
    _render_rich_table(view, rows)


def _handle_request_error(exc: ReleasyError) -> None:
    if isinstance(exc, ApiError):
        message = f"Request failed (status {exc.status}): {exc}"
        if exc.error is None and exc.body:
            message += f"\nDetails: {exc.body[:200]}"
    else:
        message = f"Request failed: {exc}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    # Respect RELEASY_VERIFY_SSL when present (1/0, true/false, yes/no).
    env_verify = os.getenv("RELEASY_VERIFY_SSL")
    if env_verify is None:
        default_verify = True
    else:
        default_verify = env_verify.strip().lower() not in {"0", "false", "no", "off"}

    return {
        "base_url": typer.Option(
            ..., "--base-url", envvar="RELEASY_BASE_URL", help="Releasy API base URL."
        ),
        "auth": typer.Option(
            "auto",
            "--auth",
            "-a",
            case_sensitive=False,
            help="Credential to send: auto, none, admin-key, api-key or jwt.",
        ),
        "admin_key": typer.Option(
            None,
            "--admin-key",
            envvar="RELEASY_ADMIN_KEY",
            help="Admin key for operator endpoints.",
        ),
        "api_key": typer.Option(
            None,
            "--api-key",
            envvar="RELEASY_API_KEY",
            help="Customer API key.",
        ),
        "token": typer.Option(
            None,
            "--token",
            envvar="RELEASY_OPERATOR_JWT",
            help="Operator JWT bearer token.",
        ),
        "user_agent": typer.Option(
            None,
            "--user-agent",
            envvar="RELEASY_USER_AGENT",
            help="Custom User-Agent header.",
        ),
        "verify_ssl": typer.Option(
            default_verify,
            "--verify/--no-verify",
            envvar="RELEASY_VERIFY_SSL",
            help="Enable or disable TLS certificate verification.",
            show_default=True,
        ),
        "cert_path": typer.Option(
            None,
            "--cert",
            envvar="RELEASY_CA_CERT",
            help="Path to a custom CA bundle for TLS verification.",
        ),
        "timeout": typer.Option(30.0, help="Request timeout (seconds).", show_default=True),
    }


_SHARED_OPTIONS = _shared_options()

_JSON_OPTION = typer.Option(False, "--json", "-j", help="Return raw JSON instead of rendering a table.")


@app.callback()
def main(
    ctx: typer.Context,
    base_url: str = _SHARED_OPTIONS["base_url"],
    auth: str = _SHARED_OPTIONS["auth"],
    admin_key: str | None = _SHARED_OPTIONS["admin_key"],
    api_key: str | None = _SHARED_OPTIONS["api_key"],
    token: str | None = _SHARED_OPTIONS["token"],
    user_agent: str | None = _SHARED_OPTIONS["user_agent"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
) -> None:
    """Connection and credential options shared by every command."""

    ctx.obj = {
        "base_url": base_url,
        "auth": auth,
        "admin_key": admin_key,
        "api_key": api_key,
        "token": token,
        "user_agent": user_agent,
        "verify_ssl": verify_ssl,
        "cert_path": cert_path,
        "timeout": timeout,
    }


def _client(ctx: typer.Context) -> ReleasyClient:
    return _build_client(**ctx.obj)


# Health -------------------------------------------------------------------


def _probe(ctx: typer.Context, name: str) -> None:
    with _client(ctx) as client:
        try:
            result = getattr(client.health, name)()
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(result.to_dict())


@health_app.command("check")
def health_check(ctx: typer.Context) -> None:
    """Report overall service health."""
    _probe(ctx, "check")


@health_app.command("live")
def health_live(ctx: typer.Context) -> None:
    """Report liveness."""
    _probe(ctx, "live")


@health_app.command("ready")
def health_ready(ctx: typer.Context) -> None:
    """Report readiness."""
    _probe(ctx, "ready")


# Customers ----------------------------------------------------------------


@customers_app.command("list")
def customers_list(
    ctx: typer.Context,
    name: str | None = typer.Option(None, "--name", help="Filter by customer name."),
    plan: str | None = typer.Option(None, "--plan", help="Filter by plan."),
    limit: int | None = typer.Option(None, "--limit", help="Page size."),
    offset: int | None = typer.Option(None, "--offset", help="Page offset."),
    output_json: bool = _JSON_OPTION,
) -> None:
    """List customers."""

    query = AdminCustomerListQuery(name=name, plan=plan, limit=limit, offset=offset)
    with _client(ctx) as client:
        try:
            page = client.customers.list(query)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    rows = [customer.to_dict() for customer in page.customers]
    _present_output(rows, view_id="customers.list", json_output=output_json)


@customers_app.command("get")
def customers_get(ctx: typer.Context, customer_id: str = typer.Argument(...)) -> None:
    """Show a single customer."""

    with _client(ctx) as client:
        try:
            customer = client.customers.get(customer_id)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(customer.to_dict())


@customers_app.command("create")
def customers_create(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="Customer name."),
    plan: str | None = typer.Option(None, "--plan", help="Optional plan identifier."),
    idempotency_key: str | None = typer.Option(
        None, "--idempotency-key", help="Let the server deduplicate retried creations."
    ),
) -> None:
    """Create a customer."""

    body = AdminCreateCustomerRequest(name=name, plan=plan)
    with _client(ctx) as client:
        try:
            created = client.customers.create_with_idempotency(body, idempotency_key)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(created.to_dict())


# Users --------------------------------------------------------------------


@users_app.command("list")
def users_list(
    ctx: typer.Context,
    customer_id: str | None = typer.Option(None, "--customer-id", help="Filter by customer."),
    email: str | None = typer.Option(None, "--email", help="Filter by email."),
    status: str | None = typer.Option(None, "--status", help="Filter by status."),
    limit: int | None = typer.Option(None, "--limit", help="Page size."),
    cursor: str | None = typer.Option(None, "--cursor", help="Continuation cursor."),
    output_json: bool = _JSON_OPTION,
) -> None:
    """List users."""

    query = UserListQuery(
        customer_id=customer_id, email=email, status=status, limit=limit, cursor=cursor
    )
    with _client(ctx) as client:
        try:
            page = client.users.list(query)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    rows = [user.to_dict() for user in page.users]
    _present_output(rows, view_id="users.list", json_output=output_json)
    if page.next_cursor and not output_json:
        typer.echo(f"Next cursor: {page.next_cursor}")


@users_app.command("get")
def users_get(ctx: typer.Context, user_id: str = typer.Argument(...)) -> None:
    """Show a single user."""

    with _client(ctx) as client:
        try:
            user = client.users.get(user_id)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(user.to_dict())


@users_app.command("reset-credentials")
def users_reset_credentials(
    ctx: typer.Context,
    user_id: str = typer.Argument(...),
    send_email: bool | None = typer.Option(
        None, "--send-email/--no-send-email", help="Ask the server to email the user."
    ),
) -> None:
    """Trigger a credential reset for a user."""

    with _client(ctx) as client:
        try:
            client.users.reset_credentials(user_id, ResetCredentialsRequest(send_email=send_email))
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    typer.secho(f"Credential reset requested for {user_id}.", fg=typer.colors.GREEN)


# Entitlements -------------------------------------------------------------


@entitlements_app.command("list")
def entitlements_list(
    ctx: typer.Context,
    customer_id: str = typer.Argument(...),
    product: str | None = typer.Option(None, "--product", help="Filter by product."),
    limit: int | None = typer.Option(None, "--limit", help="Page size."),
    offset: int | None = typer.Option(None, "--offset", help="Page offset."),
    output_json: bool = _JSON_OPTION,
) -> None:
    """List entitlements for a customer."""

    query = EntitlementListQuery(product=product, limit=limit, offset=offset)
    with _client(ctx) as client:
        try:
            page = client.entitlements.list(customer_id, query)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    rows = [entitlement.to_dict() for entitlement in page.entitlements]
    _present_output(rows, view_id="entitlements.list", json_output=output_json)


@entitlements_app.command("delete")
def entitlements_delete(
    ctx: typer.Context,
    customer_id: str = typer.Argument(...),
    entitlement_id: str = typer.Argument(...),
) -> None:
    """Delete an entitlement."""

    with _client(ctx) as client:
        try:
            client.entitlements.delete(customer_id, entitlement_id)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    typer.secho(f"Entitlement {entitlement_id} deleted.", fg=typer.colors.GREEN)


# Audit --------------------------------------------------------------------


@audit_app.command("list")
def audit_list(
    ctx: typer.Context,
    customer_id: str | None = typer.Option(None, "--customer-id", help="Filter by customer."),
    actor: str | None = typer.Option(None, "--actor", help="Filter by actor."),
    event: str | None = typer.Option(None, "--event", help="Filter by event name."),
    limit: int | None = typer.Option(None, "--limit", help="Page size."),
    offset: int | None = typer.Option(None, "--offset", help="Page offset."),
    output_json: bool = _JSON_OPTION,
) -> None:
    """List audit events."""

    query = AuditEventListQuery(
        customer_id=customer_id, actor=actor, event=event, limit=limit, offset=offset
    )
    with _client(ctx) as client:
        try:
            page = client.audit_events.list(query)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    rows = [event_row.to_dict() for event_row in page.events]
    _present_output(rows, view_id="audit.list", json_output=output_json)


# Releases -----------------------------------------------------------------


@releases_app.command("list")
def releases_list(
    ctx: typer.Context,
    product: str | None = typer.Option(None, "--product", help="Filter by product."),
    version: str | None = typer.Option(None, "--version", help="Filter by version."),
    status: str | None = typer.Option(None, "--status", help="Filter by status."),
    include_artifacts: bool | None = typer.Option(
        None,
        "--include-artifacts/--no-include-artifacts",
        help="Ask the server to embed artifact summaries.",
    ),
    limit: int | None = typer.Option(None, "--limit", help="Page size."),
    offset: int | None = typer.Option(None, "--offset", help="Page offset."),
    output_json: bool = _JSON_OPTION,
) -> None:
    """List releases."""

    query = ReleaseListQuery(
        product=product,
        version=version,
        status=status,
        include_artifacts=include_artifacts,
        limit=limit,
        offset=offset,
    )
    with _client(ctx) as client:
        try:
            page = client.releases.list(query)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    rows = [release.to_dict() for release in page.releases]
    _present_output(rows, view_id="releases.list", json_output=output_json)


@releases_app.command("create")
def releases_create(
    ctx: typer.Context,
    product: str = typer.Option(..., "--product", help="Product identifier."),
    version: str = typer.Option(..., "--version", help="Release version."),
) -> None:
    """Create a draft release."""

    with _client(ctx) as client:
        try:
            release = client.releases.create(ReleaseCreateRequest(product=product, version=version))
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(release.to_dict())


@releases_app.command("publish")
def releases_publish(ctx: typer.Context, release_id: str = typer.Argument(...)) -> None:
    """Publish a release."""

    with _client(ctx) as client:
        try:
            release = client.releases.publish(release_id)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(release.to_dict())


@releases_app.command("unpublish")
def releases_unpublish(ctx: typer.Context, release_id: str = typer.Argument(...)) -> None:
    """Return a published release to draft."""

    with _client(ctx) as client:
        try:
            release = client.releases.unpublish(release_id)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(release.to_dict())


@releases_app.command("delete")
def releases_delete(ctx: typer.Context, release_id: str = typer.Argument(...)) -> None:
    """Delete a release."""

    with _client(ctx) as client:
        try:
            client.releases.delete(release_id)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    typer.secho(f"Release {release_id} deleted.", fg=typer.colors.GREEN)


def _sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


@releases_app.command("upload")
def releases_upload(
    ctx: typer.Context,
    release_id: str = typer.Argument(...),
    file_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    platform: str = typer.Option(..., "--platform", help="Target platform, e.g. linux-x86_64."),
) -> None:
    """Presign, upload and register an artifact for a release."""

    try:
        checksum = _sha256(file_path)
        size = file_path.stat().st_size
    except OSError as exc:
        typer.secho(f"Unable to read {file_path}: {exc.strerror or exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    with _client(ctx) as client:
        try:
            presigned = client.releases.presign_artifact_upload(
                release_id, ArtifactPresignRequest(filename=file_path.name, platform=platform)
            )
            client.releases.upload_presigned_artifact(presigned.upload_url, file_path)
            registered = client.releases.register_artifact(
                release_id,
                ArtifactRegisterRequest(
                    artifact_id=presigned.artifact_id,
                    object_key=presigned.object_key,
                    checksum=checksum,
                    size=size,
                    platform=platform,
                ),
            )
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(registered.to_dict())


# Downloads ----------------------------------------------------------------


@downloads_app.command("token")
def downloads_token(
    ctx: typer.Context,
    artifact_id: str = typer.Argument(...),
    expires_in: int | None = typer.Option(None, "--expires-in", help="Token lifetime in seconds."),
    purpose: str | None = typer.Option(None, "--purpose", help="Free-form purpose tag."),
) -> None:
    """Issue a download token for an artifact."""

    body = DownloadTokenRequest(
        artifact_id=artifact_id, expires_in_seconds=expires_in, purpose=purpose
    )
    with _client(ctx) as client:
        try:
            issued = client.downloads.create_token(body)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    _echo_json(issued.to_dict())


@downloads_app.command("resolve")
def downloads_resolve(ctx: typer.Context, token: str = typer.Argument(...)) -> None:
    """Print the object location a download token redirects to."""

    with _client(ctx) as client:
        try:
            resolution = client.downloads.resolve_token(token)
        except ReleasyError as exc:
            _handle_request_error(exc)
            return
    typer.echo(resolution.location)


