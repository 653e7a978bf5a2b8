# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Client configuration resolved from arguments and environment variables."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

# Environment variable -> option name understood by the authenticator
ENV_OPTIONS = {
    "VAULT_AUTH_PATH": "path",
    "VAULT_ROLE_ID": "role-id",
    "VAULT_SECRET_ID": "secret-id",
    "VAULT_APP_ID": "app-id",
    "VAULT_USER_ID": "user-id",
    "VAULT_TOKEN": "token",
    "VAULT_USERNAME": "username",
    "VAULT_PASSWORD": "password",
    "VAULT_CLIENT_CERT": "cert",
    "VAULT_CLIENT_KEY": "key",
    "VAULT_CACERT": "caCert",
}


@dataclass
class VaultConfig:
    """Settings needed to construct a ``VaultClient``."""

    address: str | None = None
    """Vault server URL."""

    auth_type: str | None = None
    """Auth method name (app-role, app-id, github, token, userpass, kubernetes, cert)."""

    options: dict[str, str] = field(default_factory=dict)
    """Credentials, login path override and TLS file paths."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "VaultConfig":
        """Read the configuration from ``VAULT_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            VaultConfig with every variable that is set and non-empty
        """
        environ = os.environ if environ is None else environ
        options = {
            option: environ[variable]
            for variable, option in ENV_OPTIONS.items()
            if environ.get(variable)
        }
        return cls(
            address=environ.get("VAULT_ADDR") or None,
            auth_type=environ.get("VAULT_AUTH_TYPE") or None,
            options=options,
        )

    def merged(
        self,
        address: str | None = None,
        auth_type: str | None = None,
        options: Mapping[str, str] | None = None,
    ) -> "VaultConfig":
        """Return a copy where explicit values take precedence."""
        return VaultConfig(
            address=address or self.address,
            auth_type=auth_type or self.auth_type,
            options={**self.options, **(options or {})},
        )
