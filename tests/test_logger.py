# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for the structured loggers."""

import io
import json
import os
from unittest.mock import patch

import pytest

from copilot_vault import Logger, SilentLogger, StdoutLogger, create_logger


class TestLoggerInterface:
    """Tests for the Logger base class."""

    def test_abstract_methods(self):
        """Test that subclasses implement exactly the four level methods."""
        assert Logger.__abstractmethods__ == {"debug", "info", "warning", "error"}


class TestLoggerFactory:
    """Tests for create_logger."""

    def test_create_stdout_logger(self):
        """Test creating a stdout logger."""
        logger = create_logger(logger_type="stdout", level="INFO")

        assert isinstance(logger, StdoutLogger)
        assert isinstance(logger, Logger)
        assert logger.level == "INFO"

    def test_create_silent_logger(self):
        """Test creating a silent logger."""
        assert isinstance(create_logger(logger_type="silent"), SilentLogger)

    def test_defaults(self):
        """Test the default type, level and name."""
        with patch.dict(os.environ, {}, clear=True):
            logger = create_logger()

        assert isinstance(logger, StdoutLogger)
        assert logger.level == "INFO"
        assert logger.name == "copilot_vault"

    def test_from_env(self):
        """Test that LOG_* variables are honored."""
        with patch.dict(os.environ, {"LOG_TYPE": "silent", "LOG_LEVEL": "debug", "LOG_NAME": "confd"}):
            logger = create_logger()

        assert isinstance(logger, SilentLogger)
        assert logger.level == "DEBUG"
        assert logger.name == "confd"

    def test_unknown_type(self):
        """Test that an unknown logger type is rejected."""
        with pytest.raises(ValueError, match="Unknown logger_type"):
            create_logger(logger_type="syslog")

    def test_invalid_level(self):
        """Test that an unknown level is rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            StdoutLogger(level="TRACE")


class TestStdoutLogger:
    """Tests for StdoutLogger output."""

    def test_writes_json_line(self):
        """Test that entries are written as JSON with extra fields."""
        stream = io.StringIO()
        logger = StdoutLogger(level="INFO", name="test", stream=stream)

        logger.warning("Engine type pki of /pki is not supported", mount="/pki")

        entry = json.loads(stream.getvalue())
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "test"
        assert entry["message"] == "Engine type pki of /pki is not supported"
        assert entry["extra"] == {"mount": "/pki"}
        assert entry["timestamp"].endswith("Z")

    def test_filters_below_level(self):
        """Test that entries below the level are dropped."""
        stream = io.StringIO()
        logger = StdoutLogger(level="WARNING", stream=stream)

        logger.debug("hidden")
        logger.info("hidden")

        assert stream.getvalue() == ""

    def test_defaults_to_stdout(self, capsys):
        """Test that output goes to stdout when no stream is given."""
        StdoutLogger(level="INFO").info("hello")

        assert json.loads(capsys.readouterr().out)["message"] == "hello"

    def test_mirrors_to_stdlib_logging(self, caplog):
        """Test that entries are also emitted through stdlib logging."""
        logger = StdoutLogger(level="INFO", name="copilot_vault.test", stream=io.StringIO())

        with caplog.at_level("INFO", logger="copilot_vault.test"):
            logger.error("Failed to read secret /kv/x")

        assert "Failed to read secret /kv/x" in caplog.text


class TestSilentLogger:
    """Tests for SilentLogger."""

    def test_captures_entries(self):
        """Test that entries are stored with level and extra fields."""
        logger = SilentLogger()

        logger.info("first")
        logger.warning("second", key="k")

        assert logger.logs == [
            {"level": "INFO", "message": "first"},
            {"level": "WARNING", "message": "second", "extra": {"key": "k"}},
        ]

    def test_filters_and_clears(self):
        """Test level filtering, substring search and clearing."""
        logger = SilentLogger()
        logger.error("Failed to read secret")
        logger.debug("client authenticated")

        assert len(logger.get_logs("ERROR")) == 1
        assert logger.has_log("authenticated", level="DEBUG")
        assert not logger.has_log("authenticated", level="ERROR")

        logger.clear_logs()
        assert logger.logs == []
