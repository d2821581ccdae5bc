"""Session progress observers.

A ConversionSession reports to one SessionObserver. The CLI uses
StderrProgressReporter; tests and quiet modes use NullSessionObserver.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from flexigif.domain.enums import OutputFormat
    from flexigif.domain.models import ConversionResults


class SessionObserver(Protocol):
    """Receives progress and completion events from a ConversionSession."""

    def on_progress(
        self, fmt: OutputFormat, job_progress: float, overall_progress: float
    ) -> None:
        """Called whenever a job's progress advances.

        Args:
            fmt: Format of the job that advanced.
            job_progress: That job's progress, 0-100.
            overall_progress: Mean progress of all jobs, 0-100.
        """
        ...

    def on_complete(self, results: ConversionResults) -> None:
        """Called once when a session finishes without being cancelled."""
        ...


class NullSessionObserver:
    """No-op observer."""

    def on_progress(
        self, fmt: OutputFormat, job_progress: float, overall_progress: float
    ) -> None:
        pass

    def on_complete(self, results: ConversionResults) -> None:
        pass


class StderrProgressReporter:
    """Single-line in-place progress display on stderr."""

    def __init__(self, enabled: bool = True, stream: TextIO | None = None) -> None:
        """Initialize the reporter.

        Args:
            enabled: If False, suppresses output (for JSON mode or tests).
            stream: Output stream, stderr by default.
        """
        self.enabled = enabled
        self.stream = stream or sys.stderr
        self._wrote = False

    def on_progress(
        self, fmt: OutputFormat, job_progress: float, overall_progress: float
    ) -> None:
        if not self.enabled:
            return
        self.stream.write(
            f"\r{fmt.value.upper():<5} {job_progress:5.1f}%  "
            f"[overall {overall_progress:5.1f}%]"
        )
        self.stream.flush()
        self._wrote = True

    def on_complete(self, results: ConversionResults) -> None:
        if self.enabled and self._wrote:
            self.stream.write("\n")
            self.stream.flush()
            self._wrote = False
