# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for secret engine probing."""

import pytest

from copilot_vault import (
    EngineInfo,
    EngineUnsupportedError,
    KVVersion,
    ProbeError,
    probe_engine,
    require_kv_version,
)


class TestProbeEngine:
    """Tests for probe_engine."""

    @pytest.mark.parametrize(
        "options,expected",
        [
            ({"version": "2"}, KVVersion.V2),
            ({"version": "1"}, KVVersion.V1),
            ({"version": ""}, KVVersion.V1),
            ({}, KVVersion.V1),
            (None, KVVersion.V1),
            ({"version": "3"}, KVVersion.UNKNOWN),
        ],
    )
    def test_kv_versions(self, options, expected, store_factory):
        """Test that the options version maps to a KVVersion."""
        store = store_factory(mounts={"secret": {"type": "kv", "options": options}})

        info = probe_engine(store, "/secret")

        assert info == EngineInfo("kv", expected)
        assert store.calls == [("raw_read", "sys/internal/ui/mounts/secret")]

    def test_non_kv_engine(self, store_factory):
        """Test that other engine types are reported without a version."""
        store = store_factory(mounts={"pki": {"type": "pki", "options": None}})

        info = probe_engine(store, "/pki")

        assert info.engine_type == "pki"
        assert info.kv_version is KVVersion.UNKNOWN
        assert not info.is_kv

    def test_unreadable_metadata(self, store_factory):
        """Test that a failed metadata read is a ProbeError."""
        with pytest.raises(ProbeError, match="Failed to read engine metadata of /nope"):
            probe_engine(store_factory(), "/nope")

    def test_unparseable_metadata(self, store_factory):
        """Test that a non-JSON body is a ProbeError."""
        store = store_factory(mounts={"secret": b"<html>oops</html>"})

        with pytest.raises(ProbeError, match="Failed to parse"):
            probe_engine(store, "/secret")

    def test_metadata_without_data(self, store_factory):
        """Test that a body without a data object is a ProbeError."""
        store = store_factory(mounts={"secret": b'{"errors": []}'})

        with pytest.raises(ProbeError, match="has no data"):
            probe_engine(store, "/secret")

    def test_metadata_without_type(self, store_factory):
        """Test that a data object without a type is a ProbeError."""
        store = store_factory(mounts={"secret": {"options": {}}})

        with pytest.raises(ProbeError, match="no engine type"):
            probe_engine(store, "/secret")


class TestRequireKvVersion:
    """Tests for require_kv_version."""

    def test_returns_version(self):
        """Test that supported kv mounts return their version."""
        assert require_kv_version("/secret", EngineInfo("kv", KVVersion.V2)) is KVVersion.V2

    def test_rejects_other_engines(self):
        """Test that non-kv engines are unsupported."""
        with pytest.raises(EngineUnsupportedError, match="Engine type transit"):
            require_kv_version("/transit", EngineInfo("transit"))

    def test_rejects_unknown_kv_version(self):
        """Test that kv mounts of an unknown version are unsupported."""
        with pytest.raises(EngineUnsupportedError, match="version"):
            require_kv_version("/kv", EngineInfo("kv", KVVersion.UNKNOWN))
