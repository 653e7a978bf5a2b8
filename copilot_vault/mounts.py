# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Mount resolution for requested key prefixes."""

from collections.abc import Iterable

from .exceptions import ConfigError


def normalize_prefix(path: str) -> str:
    """Trim trailing ``/`` and ``*`` markers from a requested prefix."""
    return path.rstrip("/*")


def mount_of(path: str) -> str:
    """Return the mount (first path segment, with a leading ``/``) of a path.

    Example:
        >>> mount_of("/secret/foo/bar")
        '/secret'

    Raises:
        ConfigError: If the path has no first segment
    """
    segment = normalize_prefix(path).lstrip("/").split("/", 1)[0]
    if not segment:
        raise ConfigError(f"Cannot determine the mount of path '{path}'")
    return "/" + segment


def dedupe_mounts(mounts: Iterable[str]) -> list[str]:
    """Remove duplicate mounts while keeping first-seen order."""
    seen: set[str] = set()
    unique: list[str] = []
    for mount in mounts:
        if mount not in seen:
            seen.add(mount)
            unique.append(mount)
    return unique
