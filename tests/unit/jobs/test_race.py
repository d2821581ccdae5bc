"""Tests for the deadline race."""

from __future__ import annotations

import threading
import time

import pytest

from flexigif.exceptions import ConversionTimeout
from flexigif.jobs.race import first_to_settle
from flexigif.logging.context import get_job_context, job_context


class TestFirstToSettle:
    """Tests for first_to_settle."""

    def test_result_wins(self) -> None:
        """Should return the operation's result when it finishes in time."""
        assert first_to_settle(lambda: 42, timeout=1.0) == 42

    def test_exception_wins(self) -> None:
        """Should re-raise the operation's exception."""

        def boom() -> None:
            raise KeyError("nope")

        with pytest.raises(KeyError):
            first_to_settle(boom, timeout=1.0)

    def test_timer_wins(self) -> None:
        """Should raise ConversionTimeout without waiting for the operation."""
        release = threading.Event()
        started = time.monotonic()

        with pytest.raises(ConversionTimeout) as exc_info:
            first_to_settle(lambda: release.wait(5), timeout=0.05, description="WEBM")

        assert time.monotonic() - started < 2
        assert exc_info.value.timeout == 0.05
        assert "WEBM" in str(exc_info.value)
        release.set()

    def test_context_is_copied(self) -> None:
        """Should run the operation with the caller's job context."""
        with job_context("abc123", "webm", "clip.mp4"):
            seen = first_to_settle(get_job_context, timeout=1.0)
        assert seen == ("abc123", "webm", "clip.mp4")
