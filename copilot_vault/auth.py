# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Login strategies for the supported Vault auth methods."""

from collections.abc import Callable, Mapping
from typing import Any

from .exceptions import AuthError, ConfigError, ServiceAccountTokenError, StoreRequestError
from .logger import Logger, create_logger
from .params import get_parameter
from .transport import SecretStore

SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"

# Auth methods whose mount path differs from the method name
_DEFAULT_LOGIN_PATHS = {"app-role": "approle"}

LoginResult = dict[str, Any] | None


class Authenticator:
    """Obtains a session token from Vault for a configured auth method.

    Each method validates its parameters before touching the network, so a
    missing option fails with ``MissingParameterError`` and no request.

    Example:
        >>> authenticator = Authenticator(store)
        >>> store.token = authenticator.authenticate(
        ...     "app-role", {"role-id": "r", "secret-id": "s"}
        ... )
    """

    def __init__(
        self,
        store: SecretStore,
        logger: Logger | None = None,
        service_account_token_path: str = SERVICE_ACCOUNT_TOKEN_PATH,
    ):
        self.store = store
        self.logger = logger or create_logger()
        self.service_account_token_path = service_account_token_path
        self._strategies: dict[str, Callable[[str, Mapping[str, str]], LoginResult]] = {
            "app-role": self._login_app_role,
            "app-id": self._login_app_id,
            "github": self._login_github,
            "token": self._login_token,
            "userpass": self._login_userpass,
            "kubernetes": self._login_kubernetes,
            "cert": self._login_cert,
        }

    @property
    def methods(self) -> list[str]:
        """Names of the supported auth methods."""
        return list(self._strategies)

    def authenticate(self, auth_type: str, params: Mapping[str, str]) -> str:
        """Log in and return the session token.

        Args:
            auth_type: One of ``methods``
            params: Method-specific options; ``path`` overrides the login mount

        Returns:
            The client token to use for subsequent requests

        Raises:
            ConfigError: If the method is unknown or a parameter is missing
            ServiceAccountTokenError: If the Kubernetes JWT cannot be read
            AuthError: If the login fails or returns no token
        """
        strategy = self._strategies.get(auth_type)
        if strategy is None:
            raise ConfigError(
                f"Unknown auth type: {auth_type}. "
                f"Available: {', '.join(self._strategies)}"
            )

        path = params.get("path") or _DEFAULT_LOGIN_PATHS.get(auth_type, auth_type)
        url = f"auth/{path}/login"

        try:
            secret = strategy(url, params)
        except StoreRequestError as e:
            raise AuthError(f"Login with auth backend {auth_type} failed: {e.reason}") from e

        if auth_type == "token":
            token = self.store.token
        else:
            auth = (secret or {}).get("auth") or {}
            token = auth.get("client_token")
            if not token:
                raise AuthError("unable to authenticate")

        self.logger.debug("client authenticated with auth backend", auth_type=auth_type)
        return token

    def _login_app_role(self, url: str, params: Mapping[str, str]) -> LoginResult:
        body = {
            "role_id": get_parameter(params, "role-id"),
            "secret_id": get_parameter(params, "secret-id"),
        }
        return self.store.write(url, body)

    def _login_app_id(self, url: str, params: Mapping[str, str]) -> LoginResult:
        body = {
            "app_id": get_parameter(params, "app-id"),
            "user_id": get_parameter(params, "user-id"),
        }
        return self.store.write(url, body)

    def _login_github(self, url: str, params: Mapping[str, str]) -> LoginResult:
        return self.store.write(url, {"token": get_parameter(params, "token")})

    def _login_token(self, url: str, params: Mapping[str, str]) -> LoginResult:
        self.store.token = get_parameter(params, "token")
        return self.store.read("auth/token/lookup-self")

    def _login_userpass(self, url: str, params: Mapping[str, str]) -> LoginResult:
        username = get_parameter(params, "username")
        password = get_parameter(params, "password")
        return self.store.write(f"{url}/{username}", {"password": password})

    def _login_kubernetes(self, url: str, params: Mapping[str, str]) -> LoginResult:
        role = get_parameter(params, "role-id")
        jwt = self._read_service_account_token()
        return self.store.write(url, {"jwt": jwt, "role": role})

    def _login_cert(self, url: str, params: Mapping[str, str]) -> LoginResult:
        # The client certificate configured on the transport is the credential
        return self.store.write(url, {})

    def _read_service_account_token(self) -> str:
        try:
            with open(self.service_account_token_path, encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise ServiceAccountTokenError(
                f"Failed to read Kubernetes service account token "
                f"{self.service_account_token_path}: {e}"
            ) from e
