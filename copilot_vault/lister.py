# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Recursive discovery of secret paths in a key-value mount."""

from __future__ import annotations

from .engine import KVVersion
from .exceptions import ListError, StoreRequestError
from .logger import Logger, create_logger
from .transport import SecretStore


class SecretLister:
    """Walks a key-value mount and collects the path of every leaf secret.

    The two schema versions share the walk and differ only in where they
    list and how leaf paths are composed:

    - V1 lists ``<mount><subkey>`` and yields ``<mount><subkey>``
    - V2 lists ``<mount>/metadata<subkey>`` and yields ``<mount>/data<subkey>``

    Paths are returned in depth-first pre-order, the order in which they are
    discovered. A listing that fails is logged and treated as an empty
    directory. When the mount root itself lists nothing, the mount path is
    returned as the only entry.
    """

    def __init__(self, store: SecretStore, logger: Logger | None = None):
        self.store = store
        self.logger = logger or create_logger()

    def list(self, mount: str, version: KVVersion) -> list[str]:
        """Return every secret path under a mount.

        Args:
            mount: Mount path such as ``/secret``
            version: Key-value schema version of the mount

        Returns:
            Secret paths in discovery order

        Raises:
            ValueError: If version is not V1 or V2
        """
        if version not in (KVVersion.V1, KVVersion.V2):
            raise ValueError(f"Cannot list key-value version {version.value}")

        paths: list[str] = []
        if not self._walk(mount, "", version, paths):
            paths.append(mount)
        return paths

    def _list_path(self, mount: str, key: str, version: KVVersion) -> str:
        if version is KVVersion.V2:
            return f"{mount}/metadata{key}"
        return f"{mount}{key}"

    def _leaf_path(self, mount: str, key: str, version: KVVersion) -> str:
        if version is KVVersion.V2:
            return f"{mount}/data{key}"
        return f"{mount}{key}"

    def _list(self, path: str) -> list[str]:
        try:
            return self.store.list(path)
        except StoreRequestError as e:
            raise ListError(f"Couldn't list {path}: {e.reason}") from e

    def _walk(self, mount: str, key: str, version: KVVersion, paths: list[str]) -> bool:
        """Append the leaves below ``key`` to ``paths``.

        Returns:
            False if the directory at ``key`` listed no entries
        """
        list_path = self._list_path(mount, key, version)
        try:
            entries = self._list(list_path)
        except ListError as e:
            self.logger.warning(str(e), path=list_path)
            entries = []

        for entry in entries:
            child = f"{key}/{entry.rstrip('/')}"
            if entry.endswith("/"):
                self._walk(mount, child, version, paths)
            else:
                paths.append(self._leaf_path(mount, child, version))
        return bool(entries)
