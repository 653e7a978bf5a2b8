# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Flattening of structured secret values into string keys."""

import posixpath
import re
from collections.abc import Mapping, MutableMapping

from .exceptions import UnsupportedValueTypeError
from .logger import Logger, create_logger

_DATA_SEGMENT = re.compile(r"(^|/)data/")


def strip_data_segments(key: str) -> str:
    """Remove ``data/`` path segments left over from V2 path composition."""
    # Loop so adjacent segments ("data/data/") are all removed
    stripped = _DATA_SEGMENT.sub(r"\1", key)
    while stripped != key:
        key = stripped
        stripped = _DATA_SEGMENT.sub(r"\1", key)
    return stripped


def join_key(key: str, name: str) -> str:
    """Join a key and a field name, normalizing separators."""
    joined = posixpath.normpath(re.sub(r"/{2,}", "/", f"{key}/{name}"))
    # normpath keeps a POSIX double leading slash
    return re.sub(r"^/{2,}", "/", joined)


def flatten(
    key: str,
    value: object,
    result: MutableMapping[str, str],
    logger: Logger | None = None,
) -> None:
    """Write the string leaves of ``value`` into ``result``.

    Strings are stored under ``key`` (with ``data/`` segments removed) and
    mappings are descended into, one path segment per level. Other values
    are reported through ``logger`` and skipped; their siblings are still
    flattened.

    Example:
        >>> result = {}
        >>> flatten("k", {"a": "1", "b": {"c": "2"}}, result)
        >>> result
        {'k/a': '1', 'k/b/c': '2'}
    """
    logger = logger or create_logger()
    try:
        _flatten(key, value, result, logger)
    except UnsupportedValueTypeError as e:
        logger.warning(str(e), key=e.key, value_type=e.value_type)


def _flatten(key: str, value: object, result: MutableMapping[str, str], logger: Logger) -> None:
    if isinstance(value, str):
        result[strip_data_segments(key)] = value
    elif isinstance(value, Mapping):
        for name, inner in value.items():
            flatten(join_key(key, str(name)), inner, result, logger)
    else:
        raise UnsupportedValueTypeError(key, value)
