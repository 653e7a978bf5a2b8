# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory for creating Vault clients."""

from collections.abc import Mapping

from .client import VaultClient
from .config import VaultConfig
from .exceptions import ConfigError
from .logger import Logger


def create_vault_client(
    address: str | None = None,
    auth_type: str | None = None,
    options: Mapping[str, str] | None = None,
    logger: Logger | None = None,
    config: VaultConfig | None = None,
) -> VaultClient:
    """Create an authenticated VaultClient.

    Explicit arguments take precedence over ``config``, which defaults to
    ``VaultConfig.from_env()``. Options are merged key by key.

    Args:
        address: Vault server URL (VAULT_ADDR)
        auth_type: Auth method name (VAULT_AUTH_TYPE)
        options: Credentials and TLS options
        logger: Logger passed to the client
        config: Base configuration

    Returns:
        VaultClient instance

    Raises:
        ConfigError: If no address or auth type can be determined
        AuthError: If authentication fails
        TransportError: If TLS material cannot be loaded

    Example:
        >>> client = create_vault_client(auth_type="token", options={"token": "s.abc"})
    """
    base = config if config is not None else VaultConfig.from_env()
    resolved = base.merged(address=address, auth_type=auth_type, options=options)

    if not resolved.address:
        raise ConfigError(
            "Vault address not configured. Provide address parameter or set "
            "VAULT_ADDR environment variable"
        )
    if not resolved.auth_type:
        raise ConfigError(
            "Vault auth type not configured. Provide auth_type parameter or set "
            "VAULT_AUTH_TYPE environment variable"
        )

    return VaultClient(resolved.address, resolved.auth_type, resolved.options, logger=logger)
