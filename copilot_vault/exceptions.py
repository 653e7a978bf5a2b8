# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Exceptions for the Vault key-value adapter.

Construction-time errors (``ConfigError``, ``AuthError``, ``TransportError``)
propagate to the caller. Traversal-time errors (``ProbeError``,
``EngineUnsupportedError``, ``ListError``, ``ReadError``,
``UnsupportedValueTypeError``) are recovered and logged by the client.
"""


class SecretStoreError(Exception):
    """Base exception for Vault adapter errors."""
    pass


class ConfigError(SecretStoreError):
    """Raised when the client configuration is incomplete or invalid."""
    pass


class MissingParameterError(ConfigError):
    """Raised when a required authentication parameter is absent."""

    def __init__(self, key: str):
        super().__init__(f"{key} is missing from configuration")
        self.key = key


class AuthError(SecretStoreError):
    """Raised when the login call fails or yields no usable token."""
    pass


class ServiceAccountTokenError(AuthError):
    """Raised when the Kubernetes service account token cannot be read."""
    pass


class TransportError(SecretStoreError):
    """Raised when TLS material or the HTTP client cannot be set up."""
    pass


class StoreRequestError(SecretStoreError):
    """Raised by the store client when a request to Vault fails."""

    def __init__(self, operation: str, path: str, reason: str):
        super().__init__(f"{operation} {path} failed: {reason}")
        self.operation = operation
        self.path = path
        self.reason = reason


class ProbeError(SecretStoreError):
    """Raised when mount metadata cannot be read or parsed."""
    pass


class EngineUnsupportedError(SecretStoreError):
    """Raised when a mount is not a key-value engine of a known version."""
    pass


class ListError(SecretStoreError):
    """Raised when listing a directory of secrets fails."""
    pass


class ReadError(SecretStoreError):
    """Raised when reading an individual secret fails."""
    pass


class UnsupportedValueTypeError(SecretStoreError):
    """Raised when a secret field is neither a string nor a mapping."""

    def __init__(self, key: str, value: object):
        self.key = key
        self.value_type = type(value).__name__
        super().__init__(f"type of '{key}' is not supported ({self.value_type})")
