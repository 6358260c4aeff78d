"""Unit tests for logging configuration."""

import json
import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from handbrake.config.models import LoggingConfig
from handbrake.logging.config import configure_logging
from handbrake.logging.context import job_context
from handbrake.logging.handlers import JSONFormatter


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers[:] = original_handlers
    root.setLevel(original_level)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_levels(self, level: str, expected: int) -> None:
        """Should set the root level, case-insensitively."""
        configure_logging(LoggingConfig(level=level))

        assert logging.getLogger().level == expected

    def test_stderr_only(self) -> None:
        """Should add a single stderr handler when no file is given."""
        configure_logging(LoggingConfig())

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_file_handler(self, tmp_path: Path) -> None:
        """Should add a rotating file handler, creating its directory."""
        log_file = tmp_path / "logs" / "nested" / "hb.log"

        configure_logging(LoggingConfig(file=log_file, max_bytes=1024, backup_count=2))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].maxBytes == 1024
        assert handlers[0].backupCount == 2
        assert log_file.parent.is_dir()

    def test_file_and_stderr(self, tmp_path: Path) -> None:
        """Should add both handlers when include_stderr is set."""
        configure_logging(LoggingConfig(file=tmp_path / "hb.log", include_stderr=True))

        assert len(logging.getLogger().handlers) == 2

    def test_unwritable_file_falls_back_to_stderr(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Should log to stderr and say why when the log file cannot be opened."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("")

        configure_logging(LoggingConfig(file=blocker / "hb.log"))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0], RotatingFileHandler)
        assert "Could not open log file" in capsys.readouterr().err

    def test_text_format_includes_job_tag(self, tmp_path: Path) -> None:
        """Should prefix records logged inside a job with its id."""
        log_file = tmp_path / "hb.log"
        configure_logging(LoggingConfig(file=log_file))

        with job_context("3f2a9c01"):
            logging.getLogger("handbrake.test").info("Transcoding")
        logging.getLogger().handlers[0].flush()

        assert "[3f2a9c01] handbrake.test - INFO - Transcoding" in log_file.read_text()

    def test_json_format(self, tmp_path: Path) -> None:
        """Should write one JSON object per record in json format."""
        log_file = tmp_path / "hb.log"
        configure_logging(LoggingConfig(file=log_file, format="json"))

        with job_context("3f2a9c01", "/movies/movie.m4v"):
            logging.getLogger("handbrake.test").info("Transcoding")
        logging.getLogger().handlers[0].flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "Transcoding"
        assert entry["context"]["job_id"] == "3f2a9c01"
        assert entry["context"]["output_path"] == "/movies/movie.m4v"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self) -> None:
        """Should include timestamp, level, logger and message."""
        record = logging.LogRecord(
            "handbrake.executor", logging.WARNING, __file__, 1, "hello %s", ("x",), None
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "hello x"
        assert entry["logger"] == "handbrake.executor"
        assert "timestamp" in entry
        assert "context" not in entry

    def test_extra_fields_in_context(self) -> None:
        """Should put extra attributes into context."""
        record = logging.LogRecord(
            "handbrake", logging.DEBUG, __file__, 1, "done", (), None
        )
        record.returncode = 0
        record.command = "HandBrakeCLI"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["context"] == {"returncode": 0, "command": "HandBrakeCLI"}

    def test_exception(self) -> None:
        """Should include formatted exception info."""
        try:
            raise ValueError("bad")
        except ValueError:
            exc_info = sys.exc_info()
        record = logging.LogRecord(
            "handbrake", logging.ERROR, __file__, 1, "failed", (), exc_info
        )

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in entry["exception"]

    def test_job_fields_in_context(self) -> None:
        """Should report job fields in context but never the text tag."""
        record = logging.LogRecord(
            "handbrake", logging.INFO, __file__, 1, "moved", (), None
        )
        record.output_path = "/movies/movie.m4v"
        record.job_id = "3f2a9c01"
        record.job_tag = "[3f2a9c01] "

        entry = json.loads(JSONFormatter().format(record))

        assert entry["context"] == {
            "job_id": "3f2a9c01",
            "output_path": "/movies/movie.m4v",
        }
