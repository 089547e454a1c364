"""High-level Releasy REST client."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .auth.base import AuthStrategy, NoAuth
from .config import ClientConfig
from .exceptions import TransportError, UploadSourceError
from .resources import (
    ApiKeysResource,
    AuditEventsResource,
    CustomersResource,
    DownloadsResource,
    EntitlementsResource,
    HealthResource,
    ReleasesResource,
    UsersResource,
)

logger = logging.getLogger(__name__)


class ReleasyClient:
    """Wrap Releasy REST endpoints with typed helper methods.

    The client holds no mutable state beyond its session, so one instance can
    be shared between threads. Use `with_auth` to talk to the same server with
    different credentials.
    """

    def __init__(
        self,
        *,
        base_url: str,
        auth: AuthStrategy | None = None,
        user_agent: str | None = None,
        timeout: float | tuple[float, float] | None = None,
        verify_ssl: bool | str = True,
        session: requests.Session | None = None,
    ) -> None:
        config = ClientConfig.from_base_url(
            base_url,
            user_agent=user_agent,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )
        self._bind(config, auth or NoAuth(), session or requests.Session())
        self._suppress_insecure_warning_if_needed()

    def _bind(self, config: ClientConfig, auth: AuthStrategy, session: requests.Session) -> None:
        self._config = config
        self._auth = auth
        self._session = session
        self.health = HealthResource(self)
        self.customers = CustomersResource(self)
        self.users = UsersResource(self)
        self.entitlements = EntitlementsResource(self)
        self.audit_events = AuditEventsResource(self)
        self.keys = ApiKeysResource(self)
        self.downloads = DownloadsResource(self)
        self.releases = ReleasesResource(self)

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> ReleasyClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Public API --------------------------------------------------------------
    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def auth(self) -> AuthStrategy:
        return self._auth

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def with_auth(self, auth: AuthStrategy) -> ReleasyClient:
        """Return a copy using `auth`; the session and config are shared."""

        clone = object.__new__(type(self))
        clone._bind(self._config, auth, self._session)
        return clone

    def url(self, path: str) -> str:
        return f"{self._config.base_url}/{path.lstrip('/')}"

    def build_request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
        data_payload: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.PreparedRequest:
        """Compose a fully addressed, fully headered request for `path`."""

        return self._prepare(
            method,
            self.url(path),
            headers=self._prepare_headers(headers),
            params=params,
            json_payload=json_payload,
            data_payload=data_payload,
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
        data_payload: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        prepared = self.build_request(
            method,
            path,
            params=params,
            json_payload=json_payload,
            data_payload=data_payload,
            headers=headers,
        )
        return self._send(prepared)

    def upload_file(self, upload_url: str, file_path: str | Path) -> requests.Response:
        """PUT the raw bytes of `file_path` to a presigned URL without auth headers."""

        source = Path(file_path)
        try:
            handle = source.open("rb")
        except OSError as exc:
            raise UploadSourceError(str(source), exc.strerror or str(exc)) from exc
        with handle:
            prepared = self._prepare("PUT", upload_url, headers={}, data_payload=handle)
            return self._send(prepared, auth_label="presigned")

    def close(self) -> None:
        self._session.close()

    # Internal helpers -------------------------------------------------------
    def _prepare_headers(self, extra: Mapping[str, str] | None = None) -> MutableMapping[str, str]:
        headers: MutableMapping[str, str] = self._config.resolved_headers()
        self._auth.apply(headers)
        if extra:
            headers.update(extra)
        return headers

    def _prepare(
        self,
        method: str,
        url: str,
        *,
        headers: MutableMapping[str, str],
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
        data_payload: Any | None = None,
    ) -> requests.PreparedRequest:
        outbound = requests.Request(
            method=method.upper(),
            url=url,
            headers=headers,
            params=params,
            json=json_payload,
            data=data_payload,
        )
        try:
            return self._session.prepare_request(outbound)
        except requests.RequestException as exc:
            raise _transport_error(exc) from exc

    def _send(
        self, prepared: requests.PreparedRequest, *, auth_label: str | None = None
    ) -> requests.Response:
        self._log_request(prepared.method or "", prepared.url or "", auth_label or self._auth.label)
        settings = self._session.merge_environment_settings(
            prepared.url, {}, None, self._config.verify_ssl, None
        )
        try:
            return self._session.send(
                prepared,
                timeout=self._config.timeout,
                allow_redirects=False,
                **settings,
            )
        except requests.RequestException as exc:
            raise _transport_error(exc) from exc

    def _log_request(self, method: str, url: str, auth_label: str) -> None:
        logger.info("Releasy request %s %s (auth=%s)", method, url, auth_label)

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self._config.verify_ssl, bool) and not self._config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)


def _transport_error(exc: requests.RequestException) -> TransportError:
    reason = str(exc).strip() or exc.__class__.__name__
    return TransportError(f"Failed to communicate with Releasy API: {reason}", details=reason)
