"""Tests for logging configuration."""

import json
import logging

import pytest
from pydantic import ValidationError

from gphotos_export_manager.common.logging import ConsoleFormatter, LogContext, StructuredFormatter, setup_logging
from gphotos_export_manager.common.logging_config import LoggingConfig


class TestLoggingConfig:
    """Test LoggingConfig validation."""

    def test_default_values(self):
        """Test default values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == "simple"
        assert config.file is None

    def test_rejects_invalid_log_level(self):
        """Test that invalid log levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")

    def test_rejects_invalid_format(self):
        """Test that invalid formats are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")

    def test_only_simple_and_json_formats(self):
        with pytest.raises(ValidationError):
            LoggingConfig(format="detailed")

    def test_file_variables_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = LoggingConfig(file="${USER_HOME}/logs/run.log")
        assert config.file == str(tmp_path) + "/logs/run.log"

    def test_empty_file_means_none(self):
        assert LoggingConfig(file="").file is None

    def test_case_insensitive_values(self):
        """Test that level and format are normalized."""
        config = LoggingConfig(level="debug", format="JSON")
        assert config.level == "DEBUG"
        assert config.format == "json"

    def test_rejects_unknown_fields(self):
        """Test that extra fields are forbidden."""
        with pytest.raises(ValidationError):
            LoggingConfig(colour=True)


class TestStructuredFormatter:
    """Test JSON log output."""

    def test_formats_record_as_json(self):
        """Test that a record becomes one JSON object."""
        record = logging.LogRecord("x.y", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "x.y"
        assert data["message"] == "hello world"

    def test_includes_extra_fields(self):
        """Test that extra_fields are merged into the output."""
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", (), None)
        record.extra_fields = {"asset_key": "IMG_1"}
        data = json.loads(StructuredFormatter().format(record))

        assert data["asset_key"] == "IMG_1"


class TestLogContext:
    """Test LogContext record factory swapping."""

    def test_adds_fields_inside_and_restores_factory(self):
        """Test fields are attached inside the block only."""
        original_factory = logging.getLogRecordFactory()

        with LogContext(asset_key="IMG_1"):
            record = logging.getLogRecordFactory()("n", logging.INFO, __file__, 1, "m", (), None)
            assert record.extra_fields == {"asset_key": "IMG_1"}

        assert logging.getLogRecordFactory() is original_factory

    def test_nested_contexts_merge(self):
        with LogContext(archive="takeout-001"):
            with LogContext(asset_key="IMG_1"):
                record = logging.getLogRecordFactory()("n", logging.INFO, __file__, 1, "m", (), None)

        assert record.extra_fields == {"archive": "takeout-001", "asset_key": "IMG_1"}


class TestConsoleFormatter:
    """Test plain console lines."""

    def test_plain_line(self):
        record = logging.LogRecord("x.y", logging.INFO, __file__, 1, "Copied", (), None)
        assert ConsoleFormatter().format(record) == "INFO     | x.y | Copied"

    def test_context_fields_appended(self):
        record = logging.LogRecord("x.y", logging.WARNING, __file__, 1, "GPS skipped", (), None)
        record.extra_fields = {"asset_key": "IMG_1"}

        assert ConsoleFormatter().format(record) == "WARNING  | x.y | GPS skipped {'asset_key': 'IMG_1'}"


class TestSetupLogging:
    """Test root logger configuration."""

    def test_writes_json_file(self, tmp_path):
        """Test that the file handler writes JSON lines."""
        log_file = tmp_path / "logs" / "run.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(level="info", format="simple", log_file=log_file)
            logging.getLogger("test.setup").info("written")
            for handler in root.handlers:
                handler.flush()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "written"
