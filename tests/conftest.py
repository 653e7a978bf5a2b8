# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Test fixtures for the copilot_vault adapter."""

from __future__ import annotations

import json
import re
from typing import Any

import pytest

from copilot_vault import SilentLogger, StoreRequestError


def _norm(path: str) -> str:
    return re.sub(r"/{2,}", "/", path).strip("/")


class FakeStore:
    """In-memory stand-in for the hvac-backed store client.

    Paths are normalized the same way the real client normalizes them, so
    tests can key fixtures with or without leading slashes. Every call is
    recorded in ``calls`` as ``(operation, normalized_path)``.
    """

    def __init__(
        self,
        mounts: dict[str, Any] | None = None,
        listings: dict[str, list[str]] | None = None,
        secrets: dict[str, Any] | None = None,
        logins: dict[str, Any] | None = None,
        failing: set[tuple[str, str]] | None = None,
    ):
        self.mounts = {_norm(k): v for k, v in (mounts or {}).items()}
        self.listings = {_norm(k): v for k, v in (listings or {}).items()}
        self.secrets = {_norm(k): v for k, v in (secrets or {}).items()}
        self.logins = {_norm(k): v for k, v in (logins or {}).items()}
        self.failing = {(op, _norm(path)) for op, path in (failing or set())}
        self.calls: list[tuple[str, str]] = []
        self.token = ""
        self.closed = False
        self.last_body: dict[str, Any] | None = None

    def _record(self, operation: str, path: str) -> str:
        key = _norm(path)
        self.calls.append((operation, key))
        if (operation, key) in self.failing:
            raise StoreRequestError(operation, path, "permission denied")
        return key

    def read(self, path: str) -> dict[str, Any] | None:
        return self.secrets.get(self._record("read", path))

    def list(self, path: str) -> list[str]:
        return list(self.listings.get(self._record("list", path), []))

    def raw_read(self, path: str) -> bytes:
        key = self._record("raw_read", path)
        mount = key.removeprefix("sys/internal/ui/mounts/")
        if mount not in self.mounts:
            raise StoreRequestError("read", path, "permission denied")
        metadata = self.mounts[mount]
        if isinstance(metadata, bytes):
            return metadata
        return json.dumps({"data": metadata}).encode("utf-8")

    def write(self, path: str, body: dict[str, Any]) -> dict[str, Any] | None:
        key = self._record("write", path)
        self.last_body = dict(body)
        return self.logins.get(key)

    def close(self) -> None:
        self.closed = True

    def calls_for(self, operation: str) -> list[str]:
        return [path for op, path in self.calls if op == operation]


KV1 = {"type": "kv", "options": {"version": "1"}}
KV2 = {"type": "kv", "options": {"version": "2"}}


@pytest.fixture
def silent_logger() -> SilentLogger:
    """Logger that captures entries for assertions."""
    return SilentLogger()


@pytest.fixture
def kv2_store() -> FakeStore:
    """Store with a version 2 mount ``/secret`` holding two secrets."""
    return FakeStore(
        mounts={"secret": KV2},
        listings={
            "secret/metadata": ["app/", "flag"],
            "secret/metadata/app": ["db"],
        },
        secrets={
            "secret/data/app/db": {
                "data": {
                    "data": {"user": "svc", "password": "hunter2"},
                    "metadata": {"version": 3},
                },
            },
            "secret/data/flag": {
                "data": {"data": {"enabled": "yes"}, "metadata": {"version": 1}},
            },
        },
    )


@pytest.fixture
def kv1_store() -> FakeStore:
    """Store with a version 1 mount ``/kv``."""
    return FakeStore(
        mounts={"kv": KV1},
        listings={
            "kv": ["team/", "root"],
            "kv/team": ["alpha"],
        },
        secrets={
            "kv/team/alpha": {"data": {"api_key": "abc", "limits": {"rps": "10"}}},
            "kv/root": {"data": {"value": "r"}},
        },
    )


@pytest.fixture
def store_factory() -> type[FakeStore]:
    """The FakeStore class, for tests that build their own tree."""
    return FakeStore
