"""Tests for logging configuration utilities."""

from io import StringIO
import json
import logging
from pathlib import Path

from castline.core.utils.logging import (
    StructuredJSONFormatter,
    configure_logging,
    get_logger,
)


def _make_record(level=logging.INFO, msg="Test message", exc_info=None):
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.funcName = "test_function"
    record.module = "test_module"
    return record


class TestStructuredJSONFormatter:
    """Test suite for StructuredJSONFormatter."""

    def test_basic_log_format(self):
        """Test basic log record formatting to JSON."""
        data = json.loads(StructuredJSONFormatter().format(_make_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert data["context"]["logger_name"] == "test.logger"
        assert data["context"]["module"] == "test_module"
        assert data["context"]["function"] == "test_function"
        assert data["context"]["line"] == 42

    def test_standard_attributes_not_leaked(self):
        """Test that built-in record attributes stay out of context."""
        data = json.loads(StructuredJSONFormatter().format(_make_record()))

        for key in ("msg", "args", "pathname", "levelno", "created"):
            assert key not in data["context"]

    def test_log_with_extra_fields(self):
        """Test that extra fields are included in context."""
        record = _make_record(level=logging.DEBUG, msg="Debug message")
        # Add custom fields (as LoggerAdapter would)
        record.event_id = "evt_1"
        record.target_id = "alice"
        record.custom_data = {"key": "value"}

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["context"]["event_id"] == "evt_1"
        assert data["context"]["target_id"] == "alice"
        assert data["context"]["custom_data"] == {"key": "value"}

    def test_log_with_exception(self):
        """Test that exception info is captured in context."""
        try:
            raise ValueError("Test error")
        except ValueError:
            import sys

            exc_info = sys.exc_info()

        record = _make_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info)
        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["level"] == "ERROR"
        assert data["context"]["error_type"] == "ValueError"
        assert data["context"]["error_message"] == "Test error"
        assert "ValueError: Test error" in data["context"]["stack_trace"]

    def test_non_serializable_extra_uses_str(self):
        """Test that values json cannot encode fall back to str()."""
        record = _make_record()
        record.path = Path("/tmp/castline.yaml")

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["context"]["path"] == "/tmp/castline.yaml"


class TestConfigureLogging:
    """Test suite for configure_logging function."""

    def test_configure_standard_logging(self, capsys):
        """Test standard text logging configuration."""
        configure_logging(level="INFO", structured=False)

        logging.getLogger("test.standard").info("Test message")

        captured = capsys.readouterr()
        assert "Test message" in captured.out
        assert "test.standard" in captured.out
        assert "INFO" in captured.out

    def test_level_is_case_insensitive(self):
        """Test lowercase level names."""
        configure_logging(level="debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_structured_logging_to_file(self, tmp_path):
        """Test structured JSON logging to file."""
        log_file = tmp_path / "castline.jsonl"
        configure_logging(level="DEBUG", structured=True, filename=str(log_file))

        logger = logging.getLogger("test.file")
        logger.debug("Debug message")
        logger.warning("Warning message")

        lines = [json.loads(line) for line in log_file.read_text().splitlines() if line]
        assert [line["level"] for line in lines[-2:]] == ["DEBUG", "WARNING"]
        assert all(line["context"]["logger_name"] == "test.file" for line in lines[-2:])

    def test_configure_custom_format_string(self, capsys):
        """Test custom format string for standard logging."""
        configure_logging(level="INFO", format_string="%(levelname)s|%(message)s")

        logging.getLogger("test.custom").info("Custom format test")

        assert "INFO|Custom format test" in capsys.readouterr().out

    def test_reconfigure_logging(self):
        """Test that logging can be reconfigured multiple times."""
        configure_logging(level="INFO")
        configure_logging(level="WARNING")

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1


class TestGetLogger:
    """Test suite for get_logger function."""

    def test_plain_logger(self):
        """Test that no context returns the plain logger."""
        logger = get_logger("castline.test")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "castline.test"

    def test_logger_with_context(self):
        """Test that context fields reach structured output."""
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredJSONFormatter())
        base = logging.getLogger("castline.test.context")
        base.addHandler(handler)
        base.setLevel(logging.INFO)

        try:
            logger = get_logger("castline.test.context", state_id="demo")
            assert isinstance(logger, logging.LoggerAdapter)
            logger.info("Resolved")
        finally:
            base.removeHandler(handler)

        data = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert data["context"]["state_id"] == "demo"
