# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Vault key-value adapter.

Authenticates against HashiCorp Vault with one of several auth methods and
flattens every secret under a set of key prefixes into a ``dict[str, str]``
for configuration templating.

Example:
    >>> from copilot_vault import create_vault_client
    >>> client = create_vault_client(
    ...     "https://vault.example.com:8200", "token", {"token": "s.abc"}
    ... )
    >>> values = client.fetch(["/secret/app"])
"""

from .auth import SERVICE_ACCOUNT_TOKEN_PATH, Authenticator
from .client import VaultClient, encode_blob
from .config import VaultConfig
from .engine import EngineInfo, KVVersion, probe_engine, require_kv_version
from .exceptions import (
    AuthError,
    ConfigError,
    EngineUnsupportedError,
    ListError,
    MissingParameterError,
    ProbeError,
    ReadError,
    SecretStoreError,
    ServiceAccountTokenError,
    StoreRequestError,
    TransportError,
    UnsupportedValueTypeError,
)
from .factory import create_vault_client
from .flatten import flatten
from .lister import SecretLister
from .logger import Logger, SilentLogger, StdoutLogger, create_logger
from .mounts import dedupe_mounts, mount_of, normalize_prefix
from .params import get_parameter
from .transport import SecretStore, SecretStoreClient, TLSSettings, load_tls_settings

__all__ = [
    "VaultClient",
    "encode_blob",
    "VaultConfig",
    "create_vault_client",
    "Authenticator",
    "SERVICE_ACCOUNT_TOKEN_PATH",
    "SecretLister",
    "EngineInfo",
    "KVVersion",
    "probe_engine",
    "require_kv_version",
    "flatten",
    "mount_of",
    "dedupe_mounts",
    "normalize_prefix",
    "get_parameter",
    "SecretStore",
    "SecretStoreClient",
    "TLSSettings",
    "load_tls_settings",
    "Logger",
    "StdoutLogger",
    "SilentLogger",
    "create_logger",
    "SecretStoreError",
    "ConfigError",
    "MissingParameterError",
    "AuthError",
    "ServiceAccountTokenError",
    "TransportError",
    "StoreRequestError",
    "ProbeError",
    "EngineUnsupportedError",
    "ListError",
    "ReadError",
    "UnsupportedValueTypeError",
]

__version__ = "0.1.0"
