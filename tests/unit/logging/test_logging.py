"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from flexigif.config.models import LoggingConfig
from flexigif.logging import (
    JobContextFilter,
    JSONFormatter,
    build_logging_config,
    configure_logging,
    configure_logging_from_cli,
    job_context,
)
from flexigif.logging.context import get_job_context


def _record(msg: str = "hello %s", *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="flexigif.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args or ("world",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJobContext:
    """Tests for job_context and JobContextFilter."""

    def test_outside_context(self) -> None:
        """Should leave job fields empty outside a job."""
        record = _record()
        JobContextFilter().filter(record)
        assert record.session_id is None
        assert record.job_tag == ""

    def test_inside_context(self) -> None:
        """Should tag records with session and format."""
        record = _record()
        with job_context("a1b2c3", "gif", "clip.mp4"):
            JobContextFilter().filter(record)
        assert record.job_tag == "[a1b2c3:gif] "
        assert record.file_name == "clip.mp4"

    def test_session_only(self) -> None:
        """Should omit the format when none is set."""
        record = _record()
        with job_context("a1b2c3"):
            JobContextFilter().filter(record)
        assert record.job_tag == "[a1b2c3] "

    def test_nesting_restores(self) -> None:
        """Should restore the outer context on exit."""
        with job_context("outer", "gif"):
            with job_context("inner", "webm"):
                assert get_job_context()[0] == "inner"
            assert get_job_context() == ("outer", "gif", None)
        assert get_job_context() == (None, None, None)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self) -> None:
        """Should emit timestamp, level, message and logger."""
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["message"] == "hello world"
        assert entry["logger"] == "flexigif.test"
        assert entry["timestamp"].endswith("+00:00")
        assert "job" not in entry
        assert "context" not in entry

    def test_job_and_extra(self) -> None:
        """Should group job fields and keep extra= values as context."""
        record = _record(elapsed_seconds=1.5)
        with job_context("s1", "webm"):
            JobContextFilter().filter(record)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["job"] == {"session_id": "s1", "job_format": "webm"}
        assert entry["context"] == {"elapsed_seconds": 1.5}

    def test_exception(self) -> None:
        """Should include the formatted traceback."""
        try:
            raise ValueError("bad frame")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad frame" in entry["exception"]

    def test_non_ascii(self) -> None:
        """Should keep non-ASCII text readable."""
        entry = JSONFormatter().format(_record("%s", "변환 완료"))
        assert "변환 완료" in entry


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_stderr_by_default(self, restore_root_logger) -> None:
        """Should log to stderr when no file is configured."""
        configure_logging(LoggingConfig(level="debug"))
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_json_file(self, restore_root_logger, temp_dir: Path) -> None:
        """Should write JSON lines to the rotating log file."""
        log_file = temp_dir / "logs" / "flexigif.log"
        configure_logging(LoggingConfig(file=log_file, format="json"))

        with job_context("abc", "gif"):
            logging.getLogger("flexigif.test").info("converted")
        for handler in restore_root_logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "converted"
        assert entry["job"]["session_id"] == "abc"

    def test_text_format_has_job_tag(
        self, restore_root_logger, temp_dir: Path
    ) -> None:
        """Should prefix text lines with the job tag."""
        log_file = temp_dir / "flexigif.log"
        configure_logging(LoggingConfig(file=log_file))

        with job_context("abc", "webm"):
            logging.getLogger("flexigif.test").warning("slow")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert "[abc:webm] flexigif.test - WARNING - slow" in log_file.read_text()


class TestCliOverrides:
    """Tests for build_logging_config and configure_logging_from_cli."""

    def test_overrides_applied(self) -> None:
        """Should replace only the given fields."""
        base = LoggingConfig(level="info", max_bytes=123)
        result = build_logging_config(base, level="debug", format="json")
        assert result.level == "debug"
        assert result.format == "json"
        assert result.max_bytes == 123

    def test_invalid_override(self) -> None:
        """Should reject invalid levels."""
        with pytest.raises(ValueError):
            build_logging_config(LoggingConfig(), level="loud")

    def test_json_flag(self, restore_root_logger) -> None:
        """Should switch to JSON when --log-json is given."""
        final = configure_logging_from_cli(LoggingConfig(), json_format=True)
        assert final.format == "json"
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)
