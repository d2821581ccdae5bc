"""FFmpeg stderr progress parsing.

ffmpeg prints the input duration once in its banner and then periodic
status lines while encoding:

    Duration: 00:00:12.48, start: 0.000000, bitrate: 1205 kb/s
    frame=  120 fps= 60 q=-0.0 size=  512kB time=00:00:04.00 bitrate=...

Progress is the ratio of the latest ``time=`` to the ``Duration:``.
"""

from __future__ import annotations

import re

_DURATION_PATTERN = re.compile(r"Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")
_TIME_PATTERN = re.compile(r"time=\s*(\d+):(\d+):(\d+(?:\.\d+)?)")


def _to_seconds(match: re.Match[str]) -> float:
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def parse_duration(line: str) -> float | None:
    """Return the input duration in seconds from a banner line, if present."""
    match = _DURATION_PATTERN.search(line)
    return _to_seconds(match) if match else None


def parse_time(line: str) -> float | None:
    """Return the encoded time position in seconds from a status line.

    ``time=N/A`` (printed before the first frame) yields None.
    """
    match = _TIME_PATTERN.search(line)
    return _to_seconds(match) if match else None


class ProgressTracker:
    """Turn a stream of stderr lines into 0..1 progress fractions.

    One tracker covers one ffmpeg invocation.
    """

    def __init__(self) -> None:
        self.duration: float | None = None
        self.fraction = 0.0

    def feed(self, line: str) -> float | None:
        """Consume one stderr line.

        Returns:
            The new fraction when the line advanced progress, else None.
        """
        if self.duration is None:
            duration = parse_duration(line)
            if duration is not None and duration > 0:
                self.duration = duration
                return None

        position = parse_time(line)
        if position is None or not self.duration:
            return None

        fraction = min(1.0, position / self.duration)
        if fraction <= self.fraction:
            return None
        self.fraction = fraction
        return fraction
