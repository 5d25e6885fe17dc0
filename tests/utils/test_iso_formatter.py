"""Tests for JSONL log formatting and logger setup."""

import json
import logging
import sys
from pathlib import Path

import pytest

from provenance_cli.config import LoggingConfig
from provenance_cli.constants import APP_NAME
from provenance_cli.utils.logging import ISO8601Formatter, setup_cli_logging


def _record(msg: object, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name=f"{APP_NAME}.test",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=None,
        exc_info=exc_info,
    )


class TestISO8601Formatter:
    """Tests for ISO8601Formatter."""

    def test_dict_message_merged(self):
        # Act
        entry = json.loads(ISO8601Formatter().format(_record({"event": "info_resolved", "tag": 200})))

        # Assert
        assert entry["event"] == "info_resolved"
        assert entry["tag"] == 200
        assert entry["level"] == "DEBUG"
        assert entry["logger"] == f"{APP_NAME}.test"
        assert entry["time"].endswith("Z")

    def test_plain_message(self):
        entry = json.loads(ISO8601Formatter().format(_record("hello")))

        assert entry["message"] == "hello"

    def test_non_json_values_stringified(self):
        entry = json.loads(ISO8601Formatter().format(_record({"path": Path("/tmp/x")})))

        assert entry["path"] == "/tmp/x"

    def test_exception_included(self):
        # Arrange
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()

        # Act
        entry = json.loads(ISO8601Formatter().format(_record("failed", exc_info=exc_info)))

        # Assert
        assert "ValueError: boom" in entry["exception"]


class TestSetupCliLogging:
    """Tests for setup_cli_logging."""

    @pytest.fixture(autouse=True)
    def _reset_logger(self):
        yield
        logger = logging.getLogger(APP_NAME)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_disabled_without_log_dir(self):
        # Act
        log_file = setup_cli_logging(LoggingConfig())

        # Assert
        assert log_file is None
        handlers = logging.getLogger(APP_NAME).handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)

    def test_writes_jsonl_file(self, tmp_path: Path):
        # Arrange
        log_file = setup_cli_logging(LoggingConfig(log_dir=str(tmp_path / "logs"), log_level="DEBUG"))

        # Act
        logging.getLogger(f"{APP_NAME}.resolver").debug({"event": "info_resolved"})
        for handler in logging.getLogger(APP_NAME).handlers:
            handler.flush()

        # Assert
        assert log_file == tmp_path / "logs" / "provenance-cli.jsonl"
        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["event"] == "info_resolved"
        assert entry["logger"] == f"{APP_NAME}.resolver"

    def test_level_filters(self, tmp_path: Path):
        # Arrange
        log_file = setup_cli_logging(LoggingConfig(log_dir=str(tmp_path), log_level="WARNING"))

        # Act
        logging.getLogger(f"{APP_NAME}.resolver").debug({"event": "dropped"})
        logging.getLogger(f"{APP_NAME}.resolver").warning({"event": "kept"})
        for handler in logging.getLogger(APP_NAME).handlers:
            handler.flush()

        # Assert
        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert events == ["kept"]

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path: Path):
        config = LoggingConfig(log_dir=str(tmp_path))

        setup_cli_logging(config)
        setup_cli_logging(config)

        assert len(logging.getLogger(APP_NAME).handlers) == 1
