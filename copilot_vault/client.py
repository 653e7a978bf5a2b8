# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Vault client facade: authenticate once, then fetch flattened secrets."""

import json
import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .auth import Authenticator
from .engine import KVVersion, probe_engine, require_kv_version
from .exceptions import (
    ConfigError,
    EngineUnsupportedError,
    ProbeError,
    ReadError,
    StoreRequestError,
)
from .flatten import flatten
from .lister import SecretLister
from .logger import Logger, create_logger
from .mounts import dedupe_mounts, mount_of
from .transport import SecretStore, SecretStoreClient


# Characters json.Marshal escapes inside strings even with raw UTF-8 output
_HTML_ESCAPES = str.maketrans({
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
})


def encode_blob(data: Any) -> str:
    """Encode a secret payload as compact JSON with sorted keys.

    Non-ASCII text is kept as UTF-8 while ``<``, ``>``, ``&`` and the
    Unicode line separators are escaped, so blobs match those written by
    Go's encoding/json.
    """
    encoded = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    # These characters can only occur inside JSON strings
    return encoded.translate(_HTML_ESCAPES)


class VaultClient:
    """Authenticated client that turns key-value mounts into a flat mapping.

    Construction authenticates immediately. Configuration, transport and
    authentication errors are raised from ``__init__``, so an instance is
    always usable. ``fetch`` never raises for problems with individual
    mounts or secrets; those are logged and skipped.

    Example:
        >>> client = VaultClient(
        ...     "https://vault.example.com:8200",
        ...     "app-role",
        ...     {"role-id": "my-role", "secret-id": "my-secret"},
        ... )
        >>> values = client.fetch(["/secret/app/*"])
        >>> values["/secret/app/db/password"]
        'hunter2'

    Attributes:
        address: Vault server URL
        auth_type: Auth method used to obtain the session token
        store: Secret store holding the session token
    """

    def __init__(
        self,
        address: str,
        auth_type: str,
        options: Mapping[str, str] | None = None,
        logger: Logger | None = None,
        store: SecretStore | None = None,
    ):
        """Create the store client and authenticate.

        Args:
            address: Vault server URL
            auth_type: One of the methods supported by ``Authenticator``
            options: Credentials, ``path`` override and TLS options
                (``cert``, ``key``, ``caCert``)
            logger: Logger for progress and recovered errors
            store: Pre-built store; by default an hvac-backed client is
                created from ``address`` and the TLS options

        Raises:
            ConfigError: If auth_type or address is missing, the method is
                unknown, or a required parameter is absent
            TransportError: If TLS material cannot be loaded
            AuthError: If authentication fails
        """
        if not auth_type:
            raise ConfigError("you have to set the auth type when using the vault backend")
        if not address and store is None:
            raise ConfigError("you have to set the address when using the vault backend")

        self.address = address
        self.auth_type = auth_type
        self.logger = logger or create_logger()
        options = dict(options or {})

        self.logger.info("Vault authentication backend set", auth_type=auth_type)

        if store is not None:
            self.store = store
        else:
            self.store = SecretStoreClient.from_options(address, options)
        try:
            authenticator = Authenticator(self.store, logger=self.logger)
            self.store.token = authenticator.authenticate(auth_type, options)
        except Exception:
            if store is None:
                self.store.close()
            raise

        self._lister = SecretLister(self.store, logger=self.logger)

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.store.close()

    def __enter__(self) -> "VaultClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def fetch(self, prefixes: Iterable[str]) -> dict[str, str]:
        """Fetch every secret in the mounts of the given prefixes.

        Each secret contributes its payload as compact JSON under its own path
        and each string field under the flattened key.

        Args:
            prefixes: Requested key prefixes, e.g. ``["/secret/app/*"]``

        Returns:
            Mapping of key to string value
        """
        values: dict[str, str] = {}
        for mount in self._mounts(prefixes):
            try:
                version = require_kv_version(mount, probe_engine(self.store, mount))
            except ProbeError as e:
                self.logger.error(str(e), mount=mount)
                continue
            except EngineUnsupportedError as e:
                self.logger.warning(str(e), mount=mount)
                continue

            for path in self._lister.list(mount, version):
                try:
                    data = self._read(path, version)
                except ReadError as e:
                    self.logger.error(str(e), path=path)
                    continue
                values[path] = encode_blob(data)
                flatten(path, data, values, self.logger)
        return values

    def watch_prefix(
        self,
        prefix: str,
        keys: Sequence[str],
        wait_index: int,
        stop_event: threading.Event,
    ) -> int:
        """Watching is not implemented; block until ``stop_event`` is set.

        Returns:
            Always 0
        """
        stop_event.wait()
        return 0

    def _mounts(self, prefixes: Iterable[str]) -> list[str]:
        mounts = []
        for prefix in prefixes:
            try:
                mounts.append(mount_of(prefix))
            except ConfigError as e:
                self.logger.warning(str(e), prefix=prefix)
        return dedupe_mounts(mounts)

    def _read(self, path: str, version: KVVersion) -> Any:
        """Read a secret and return the part that is flattened."""
        try:
            response = self.store.read(path)
        except StoreRequestError as e:
            raise ReadError(f"Failed to read secret {path}: {e.reason}") from e

        if response is None:
            raise ReadError(f"Secret not found: {path}")

        data = response.get("data")
        if version is KVVersion.V2 and isinstance(data, dict):
            data = data.get("data")
        if data is None:
            raise ReadError(f"Secret {path} has no data")
        return data
