# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Secret engine detection for a mount."""

import json
from dataclasses import dataclass
from enum import Enum

from .exceptions import EngineUnsupportedError, ProbeError, StoreRequestError
from .transport import SecretStore

MOUNT_METADATA_PATH = "sys/internal/ui/mounts"
KV_ENGINE = "kv"


class KVVersion(Enum):
    """Schema version of a key-value engine."""
    V1 = "1"
    V2 = "2"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EngineInfo:
    """Engine attached to a mount."""

    engine_type: str
    kv_version: KVVersion = KVVersion.UNKNOWN

    @property
    def is_kv(self) -> bool:
        return self.engine_type == KV_ENGINE


def _kv_version(options: object) -> KVVersion:
    # Version 1 mounts report null options or an empty version
    if options is None:
        return KVVersion.V1
    if not isinstance(options, dict):
        return KVVersion.UNKNOWN
    version = options.get("version") or ""
    if version in ("", "1"):
        return KVVersion.V1
    if version == "2":
        return KVVersion.V2
    return KVVersion.UNKNOWN


def probe_engine(store: SecretStore, mount: str) -> EngineInfo:
    """Query the mount metadata endpoint and describe the mount's engine.

    Args:
        store: Authenticated secret store
        mount: Mount path such as ``/secret``

    Returns:
        EngineInfo for the mount

    Raises:
        ProbeError: If the metadata cannot be read or parsed
    """
    try:
        raw = store.raw_read(f"{MOUNT_METADATA_PATH}/{mount.strip('/')}")
    except StoreRequestError as e:
        raise ProbeError(f"Failed to read engine metadata of {mount}: {e.reason}") from e

    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise ProbeError(f"Failed to parse engine metadata of {mount}: {e}") from e

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ProbeError(f"Engine metadata of {mount} has no data")

    engine_type = data.get("type")
    if not isinstance(engine_type, str):
        raise ProbeError(f"Engine metadata of {mount} has no engine type")

    if engine_type != KV_ENGINE:
        return EngineInfo(engine_type)
    return EngineInfo(engine_type, _kv_version(data.get("options")))


def require_kv_version(mount: str, info: EngineInfo) -> KVVersion:
    """Return the key-value version of a mount that can be traversed.

    Raises:
        EngineUnsupportedError: If the engine is not kv, or is kv of an
            unknown version
    """
    if not info.is_kv:
        raise EngineUnsupportedError(f"Engine type {info.engine_type} of {mount} is not supported")
    if info.kv_version is KVVersion.UNKNOWN:
        raise EngineUnsupportedError(f"Key-value version of {mount} is not supported")
    return info.kv_version
