"""Conversion engine and transcode backend protocols."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from flexigif.domain.enums import EngineState, OutputFormat
from flexigif.domain.models import (
    EstimateResult,
    OutputBlob,
    VideoFile,
    VideoMetadata,
)

# Backend progress: fraction 0..1 of the current invocation
BackendProgressHandler = Callable[[float], None]
LogHandler = Callable[[str], None]

# Engine progress: percent 0..100 of the whole conversion
ProgressHandler = Callable[[float], None]

S = TypeVar("S", contravariant=True)


class TranscodeBackend(Protocol):
    """Boundary to a transcode executable with a private file namespace.

    Files are addressed by plain names (no path separators) inside the
    backend's workspace; exec() arguments refer to the same names.

    Progress and log handlers are registered per calling thread, and
    exec() reports only to the handlers of the thread that called it.
    An invocation left running on another thread cannot reach the
    handlers of a newer one.
    """

    @property
    def loaded(self) -> bool:
        """True once load() has succeeded."""
        ...

    def load(self) -> None:
        """Locate and verify the executable and prepare the workspace.

        Raises:
            EnvironmentUnsupported: If the executable or workspace is
                unavailable.
        """
        ...

    def write_file(self, name: str, data: bytes) -> None: ...

    def read_file(self, name: str) -> bytes: ...

    def delete_file(self, name: str) -> None: ...

    def exec(self, args: list[str]) -> int:
        """Run one invocation and return its exit code."""
        ...

    def set_progress_handler(self, handler: BackendProgressHandler | None) -> None:
        ...

    def set_log_handler(self, handler: LogHandler | None) -> None: ...


class ConversionEngine(Protocol[S]):
    """One output format's conversion capability."""

    format: OutputFormat

    @property
    def state(self) -> EngineState: ...

    def initialize(self) -> None:
        """Load the backend. Idempotent; concurrent callers share one load.

        Raises:
            EnvironmentUnsupported: If the environment cannot run it.
            InitializationFailed: If loading failed for any other reason.
        """
        ...

    def convert(self, file: VideoFile, settings: S) -> OutputBlob:
        """Convert file, reporting progress to the registered handler.

        Raises:
            ExecutionFailed: If an invocation fails.
            DecodeFailed: If the output cannot be read back.
        """
        ...

    def estimate(
        self,
        file: VideoFile,
        settings: S,
        metadata: VideoMetadata | None = None,
    ) -> EstimateResult: ...

    def set_progress_handler(self, handler: ProgressHandler | None) -> None:
        """Register the single progress observer, replacing any previous one."""
        ...


@dataclass(frozen=True)
class EngineSet:
    """One engine per output format."""

    gif: ConversionEngine
    webm: ConversionEngine

    def __getitem__(self, fmt: OutputFormat) -> ConversionEngine:
        if fmt is OutputFormat.GIF:
            return self.gif
        return self.webm
