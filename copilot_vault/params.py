# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Access to authentication parameters."""

from collections.abc import Mapping

from .exceptions import MissingParameterError


def get_parameter(params: Mapping[str, str], key: str) -> str:
    """Return a required parameter value.

    An empty string is treated the same as a missing key.

    Args:
        params: Option mapping supplied by the caller
        key: Name of the required option

    Returns:
        The parameter value

    Raises:
        MissingParameterError: If the key is absent or empty
    """
    value = params.get(key)
    if not value:
        raise MissingParameterError(key)
    return value
