"""Tests for logging configuration utilities."""

from io import StringIO
import json
import logging
import sys

import pytest

from oddiya.core.utils.logging import (
    StructuredJSONFormatter,
    configure_logging,
    get_logger,
    log_performance,
)


def _record(msg: str = "Test message", level: int = logging.INFO) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    record.funcName = "test_function"
    record.module = "test_module"
    return record


class TestStructuredJSONFormatter:
    """Test suite for StructuredJSONFormatter."""

    def test_basic_log_format(self):
        """Records become one JSON object with a context block."""
        data = json.loads(StructuredJSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert data["context"]["logger_name"] == "test.logger"
        assert data["context"]["module"] == "test_module"
        assert data["context"]["function"] == "test_function"
        assert data["context"]["line"] == 42

    def test_log_with_extra_fields(self):
        """Extra fields (as a LoggerAdapter adds them) land in context."""
        record = _record()
        record.seed = 1234.5
        record.session_id = "trip-1"

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["context"]["seed"] == 1234.5
        assert data["context"]["session_id"] == "trip-1"

    def test_log_with_exception(self):
        """Exception info is captured."""
        try:
            raise ValueError("bad beat")
        except ValueError:
            record = logging.LogRecord(
                name="test.logger",
                level=logging.ERROR,
                pathname="/path/to/file.py",
                lineno=1,
                msg="Failed",
                args=(),
                exc_info=sys.exc_info(),
            )

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["context"]["error_type"] == "ValueError"
        assert data["context"]["error_message"] == "bad beat"
        assert "Traceback" in data["context"]["stack_trace"]


@pytest.mark.usefixtures("isolated_logging")
class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_sets_level(self):
        configure_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_writes_to_file(self, tmp_path):
        log_file = tmp_path / "oddiya.log"
        configure_logging(level="INFO", filename=str(log_file), format_string="%(message)s")

        logging.getLogger("oddiya.test").info("planned")
        logging.getLogger().handlers[0].flush()

        assert log_file.read_text().strip() == "planned"

    def test_structured_output(self, tmp_path):
        log_file = tmp_path / "oddiya.jsonl"
        configure_logging(level="INFO", filename=str(log_file), structured=True)

        get_logger("oddiya.test", seed=5.0).info("structured")
        logging.getLogger().handlers[0].flush()

        data = json.loads(log_file.read_text().strip())
        assert data["message"] == "structured"
        assert data["context"]["seed"] == 5.0


class TestGetLogger:
    """Test suite for get_logger."""

    def test_plain_logger(self):
        assert isinstance(get_logger("oddiya.test"), logging.Logger)

    def test_adapter_with_context(self):
        logger = get_logger("oddiya.test", session_id="trip-1")
        assert isinstance(logger, logging.LoggerAdapter)
        assert logger.extra == {"session_id": "trip-1"}

    def test_adapter_passes_context_to_handlers(self):
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(session_id)s %(message)s"))
        base = logging.getLogger("oddiya.test.adapter")
        base.addHandler(handler)
        base.setLevel(logging.INFO)
        try:
            get_logger("oddiya.test.adapter", session_id="trip-7").info("hello")
        finally:
            base.removeHandler(handler)

        assert stream.getvalue().strip() == "trip-7 hello"


class TestLogPerformance:
    """Test suite for the log_performance decorator."""

    def test_returns_result_and_logs(self, caplog):
        @log_performance
        def add(a, b):
            return a + b

        with caplog.at_level(logging.DEBUG, logger=__name__):
            assert add(2, 3) == 5

        assert "took" in caplog.text
        assert add.__name__ == "add"
