"""Tests for ffmpeg stderr progress parsing."""

from __future__ import annotations

import pytest

from flexigif.executor.ffmpeg_progress import (
    ProgressTracker,
    parse_duration,
    parse_time,
)

BANNER = "  Duration: 00:01:00.50, start: 0.000000, bitrate: 1205 kb/s"


def _status(time: str) -> str:
    return f"frame=  120 fps= 60 q=-0.0 size=  512kB time={time} bitrate=1.0kbits/s"


class TestParsers:
    """Tests for parse_duration and parse_time."""

    def test_duration(self) -> None:
        """Should read the banner duration."""
        assert parse_duration(BANNER) == pytest.approx(60.5)

    def test_time(self) -> None:
        """Should read the status line position."""
        assert parse_time(_status("01:00:02.25")) == pytest.approx(3602.25)

    def test_time_not_available(self) -> None:
        """Should ignore time=N/A."""
        assert parse_time(_status("N/A")) is None


class TestProgressTracker:
    """Tests for ProgressTracker."""

    def test_fractions(self) -> None:
        """Should report position over duration."""
        tracker = ProgressTracker()
        assert tracker.feed("  Duration: 00:00:10.00, start: 0.0") is None
        assert tracker.feed(_status("00:00:02.50")) == pytest.approx(0.25)
        assert tracker.feed(_status("00:00:10.00")) == pytest.approx(1.0)

    def test_never_goes_backwards(self) -> None:
        """Should drop positions that do not advance."""
        tracker = ProgressTracker()
        tracker.feed("Duration: 00:00:10.00")
        tracker.feed(_status("00:00:05.00"))
        assert tracker.feed(_status("00:00:04.00")) is None
        assert tracker.feed(_status("00:00:05.00")) is None

    def test_capped_at_one(self) -> None:
        """Should not exceed 1.0 when encoding past the input duration."""
        tracker = ProgressTracker()
        tracker.feed("Duration: 00:00:10.00")
        assert tracker.feed(_status("00:00:11.00")) == 1.0

    def test_no_duration(self) -> None:
        """Should report nothing before a duration is known."""
        assert ProgressTracker().feed(_status("00:00:05.00")) is None

    def test_second_duration_ignored(self) -> None:
        """Should keep the first duration (the input's)."""
        tracker = ProgressTracker()
        tracker.feed("Duration: 00:00:10.00")
        tracker.feed("Duration: 00:00:20.00")
        assert tracker.feed(_status("00:00:05.00")) == pytest.approx(0.5)
