# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Secret store client built on hvac.

``SecretStoreClient`` is the only place that talks HTTP. It exposes the small
surface the rest of the adapter needs (read, list, raw read, write, token)
and turns every hvac or requests failure into ``StoreRequestError`` so that
callers can decide which of their own errors it represents.
"""

from __future__ import annotations

import re
import ssl
from collections.abc import Mapping
from contextlib import closing
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import hvac
import requests
from hvac.adapters import RawAdapter
from hvac.exceptions import VaultError

from .exceptions import StoreRequestError, TransportError

DEFAULT_TIMEOUT = 30


@runtime_checkable
class SecretStore(Protocol):
    """Operations the adapter consumes from a secret store."""

    token: str

    def read(self, path: str) -> dict[str, Any] | None: ...

    def list(self, path: str) -> list[str]: ...

    def raw_read(self, path: str) -> bytes: ...

    def write(self, path: str, body: Mapping[str, Any]) -> dict[str, Any] | None: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class TLSSettings:
    """TLS material used to reach the Vault server."""

    client_cert: tuple[str, str] | None = None
    """Client certificate and key paths for mutual TLS."""

    ca_cert: str | None = None
    """CA bundle used to verify the server; system defaults when unset."""

    @property
    def verify(self) -> str | bool:
        return self.ca_cert or True


def load_tls_settings(options: Mapping[str, str]) -> TLSSettings:
    """Build TLS settings from the ``cert``, ``key`` and ``caCert`` options.

    The client certificate is used only when both ``cert`` and ``key`` are
    set. Files are loaded once here so that unreadable or malformed material
    fails at construction instead of on the first request.

    Raises:
        TransportError: If a certificate, key or CA bundle cannot be loaded
    """
    cert = options.get("cert")
    key = options.get("key")
    ca_cert = options.get("caCert")

    context = ssl.create_default_context()
    client_cert = None
    if cert and key:
        try:
            context.load_cert_chain(certfile=cert, keyfile=key)
        except (OSError, ssl.SSLError) as e:
            raise TransportError(f"Failed to load client certificate '{cert}': {e}") from e
        client_cert = (cert, key)

    if ca_cert:
        try:
            context.load_verify_locations(cafile=ca_cert)
        except (OSError, ssl.SSLError) as e:
            raise TransportError(f"Failed to load CA certificate '{ca_cert}': {e}") from e

    return TLSSettings(client_cert=client_cert, ca_cert=ca_cert or None)


def _api_path(path: str) -> str:
    """Collapse repeated slashes and drop leading/trailing ones."""
    return re.sub(r"/{2,}", "/", path).strip("/")


class SecretStoreClient:
    """``SecretStore`` implementation over ``hvac.Client``.

    Example:
        >>> store = SecretStoreClient("https://vault.example.com:8200")
        >>> store.token = "s.abc"
        >>> store.list("secret/metadata")
        ['app/', 'db']
    """

    def __init__(
        self,
        address: str,
        tls: TLSSettings | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Create the underlying hvac client.

        Args:
            address: Vault server URL
            tls: TLS settings; server verification with system CAs when None
            timeout: Per-request timeout in seconds

        Raises:
            TransportError: If the HTTP client cannot be created
        """
        self.address = address
        self.tls = tls or TLSSettings()
        self.timeout = timeout
        try:
            # An explicit empty token keeps hvac from picking up VAULT_TOKEN
            # or ~/.vault-token; the session token only comes from login.
            self._client = hvac.Client(
                url=address,
                token="",
                cert=self.tls.client_cert,
                verify=self.tls.verify,
                timeout=timeout,
            )
        except (ValueError, TypeError, requests.exceptions.RequestException) as e:
            raise TransportError(f"Failed to create Vault client for {address}: {e}") from e

    @classmethod
    def from_options(cls, address: str, options: Mapping[str, str]) -> "SecretStoreClient":
        """Create a client using the TLS options of an option mapping."""
        return cls(address, tls=load_tls_settings(options))

    @property
    def token(self) -> str:
        return self._client.token or ""

    @token.setter
    def token(self, value: str) -> None:
        self._client.token = value

    def read(self, path: str) -> dict[str, Any] | None:
        """Read a path; returns None when Vault reports it does not exist."""
        try:
            return self._client.read(_api_path(path))
        except (VaultError, requests.exceptions.RequestException) as e:
            raise StoreRequestError("read", path, str(e)) from e

    def list(self, path: str) -> list[str]:
        """List the immediate children of a path; empty when there are none."""
        try:
            response = self._client.list(_api_path(path))
        except (VaultError, requests.exceptions.RequestException) as e:
            raise StoreRequestError("list", path, str(e)) from e
        if not response:
            return []
        keys = (response.get("data") or {}).get("keys") or []
        return [str(key) for key in keys]

    def raw_read(self, path: str) -> bytes:
        """GET a path and return the undecoded response body."""
        adapter = RawAdapter(
            base_uri=self.address,
            token=self.token,
            cert=self.tls.client_cert,
            verify=self.tls.verify,
            timeout=self.timeout,
            session=self._client.adapter.session,
        )
        try:
            response = adapter.get(f"/v1/{_api_path(path)}")
        except (VaultError, requests.exceptions.RequestException) as e:
            raise StoreRequestError("read", path, str(e)) from e
        with closing(response):
            return response.content

    def write(self, path: str, body: Mapping[str, Any]) -> dict[str, Any] | None:
        """POST a JSON body to a path and return the decoded response."""
        try:
            response = self._client.write_data(_api_path(path), data=dict(body))
        except (VaultError, requests.exceptions.RequestException) as e:
            raise StoreRequestError("write", path, str(e)) from e
        # 204 responses come back as a requests.Response rather than a dict
        return response if isinstance(response, dict) else None

    def close(self) -> None:
        """Close the HTTP session."""
        self._client.adapter.close()
