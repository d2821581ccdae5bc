"""Shared conversion engine lifecycle.

BaseEngine owns a TranscodeBackend and implements the parts every
format shares: locked one-time initialization, scoped workspace
artifacts, multi-pass progress mapping and failure translation.
Subclasses only plan the invocations for their format.
"""

from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

from flexigif.domain.enums import EngineState, OutputFormat
from flexigif.domain.models import (
    EstimateResult,
    OutputBlob,
    VideoFile,
    VideoMetadata,
)
from flexigif.exceptions import (
    DecodeFailed,
    EnvironmentUnsupported,
    ExecutionFailed,
    FlexiGifError,
    InitializationFailed,
)
from flexigif.executor.interface import ProgressHandler, TranscodeBackend

logger = logging.getLogger(__name__)

S = TypeVar("S")

STDERR_TAIL_LINES = 20


@dataclass(frozen=True)
class ConversionPlan:
    """Invocations for one conversion and the workspace names they touch."""

    commands: list[list[str]]
    output_name: str
    intermediate_names: tuple[str, ...] = ()


class BaseEngine(ABC, Generic[S]):
    """Base class for format engines.

    Args:
        backend: Transcode backend owned by this engine.
        locale: Locale for estimate warnings.
    """

    format: ClassVar[OutputFormat]

    def __init__(self, backend: TranscodeBackend, locale: str | None = None) -> None:
        self.backend = backend
        self.locale = locale
        self._state = EngineState.UNINITIALIZED
        self._init_lock = threading.Lock()
        self._progress_handler: ProgressHandler | None = None

    @property
    def state(self) -> EngineState:
        return self._state

    def set_progress_handler(self, handler: ProgressHandler | None) -> None:
        self._progress_handler = handler

    def initialize(self) -> None:
        """Load the backend once.

        Concurrent callers block on the same lock, so only the first one
        loads and the rest return once it is ready. A failed load leaves
        the engine uninitialized so a later call can retry.
        """
        if self._state is EngineState.READY:
            return

        with self._init_lock:
            if self._state is EngineState.READY:
                return
            self._state = EngineState.INITIALIZING
            try:
                if not self.backend.loaded:
                    self.backend.load()
            except (EnvironmentUnsupported, InitializationFailed):
                self._state = EngineState.UNINITIALIZED
                raise
            except Exception as e:
                self._state = EngineState.UNINITIALIZED
                raise InitializationFailed(
                    f"{self.format.value} engine failed to load: {e}", cause=e
                ) from e
            self._state = EngineState.READY
            logger.debug("%s engine ready", self.format.value)

    @abstractmethod
    def plan(self, input_name: str, token: str, settings: S) -> ConversionPlan:
        """Build the invocations that turn input_name into the output."""

    @abstractmethod
    def estimate(
        self,
        file: VideoFile,
        settings: S,
        metadata: VideoMetadata | None = None,
    ) -> EstimateResult: ...

    def convert(self, file: VideoFile, settings: S) -> OutputBlob:
        """Convert file and return the output bytes.

        Every workspace file this call names (input, intermediates,
        output) is deleted before returning or raising. Progress goes to
        the handler registered when the call starts; a call abandoned by
        a timeout keeps reporting only to that handler.

        Raises:
            EnvironmentUnsupported: If the backend cannot run here.
            InitializationFailed: If the backend fails to load.
            ExecutionFailed: If an invocation fails or exits nonzero.
            DecodeFailed: If the output cannot be read back.
        """
        self.initialize()

        token = uuid.uuid4().hex[:12]
        input_name = f"input_{token}.{file.extension}"
        plan = self.plan(input_name, token, settings)
        artifacts = [input_name, *plan.intermediate_names, plan.output_name]

        run = _ConversionRun(self.format, self._progress_handler)
        self.backend.set_log_handler(run.on_log)
        try:
            self.backend.write_file(input_name, file.read_bytes())
            run.emit(0.0)

            passes = len(plan.commands)
            for index, args in enumerate(plan.commands):
                self._run_pass(run, args, index, passes)

            data = self._read_output(plan.output_name)
            run.emit(100.0)
            logger.info(
                "Converted %s to %s (%d bytes)",
                file.name,
                self.format.value,
                len(data),
            )
            return OutputBlob(data=data, mime_type=self.format.mime_type)
        finally:
            self.backend.set_progress_handler(None)
            self.backend.set_log_handler(None)
            for name in artifacts:
                self._delete_artifact(name)

    def _run_pass(
        self, run: _ConversionRun, args: list[str], index: int, passes: int
    ) -> None:
        """Run one invocation, mapping its progress onto its share of 0..100."""
        span = 100.0 / passes
        offset = span * index

        def on_fraction(fraction: float) -> None:
            run.emit(offset + span * max(0.0, min(1.0, fraction)))

        self.backend.set_progress_handler(on_fraction)
        try:
            returncode = self.backend.exec(args)
        except FlexiGifError:
            raise
        except Exception as e:
            raise ExecutionFailed(
                f"{self.format.value} pass {index + 1}/{passes} raised: {e}",
                stderr_tail=run.tail(),
            ) from e

        if returncode != 0:
            raise ExecutionFailed(
                f"{self.format.value} pass {index + 1}/{passes} exited with "
                f"{returncode}",
                returncode=returncode,
                stderr_tail=run.tail(),
            )
        run.emit(offset + span)

    def _read_output(self, name: str) -> bytes:
        try:
            data = self.backend.read_file(name)
        except (OSError, ValueError) as e:
            raise DecodeFailed(f"Cannot read {self.format.value} output: {e}") from e
        if not data:
            raise DecodeFailed(f"{self.format.value} output is empty")
        return data

    def _delete_artifact(self, name: str) -> None:
        try:
            self.backend.delete_file(name)
        except (OSError, ValueError) as e:
            logger.warning("Failed to delete workspace file %s: %s", name, e)


class _ConversionRun:
    """Progress and stderr state of a single convert() call."""

    def __init__(self, fmt: OutputFormat, handler: ProgressHandler | None) -> None:
        self.format = fmt
        self.handler = handler
        self.progress = 0.0
        self.stderr_tail: deque[str] = deque(maxlen=STDERR_TAIL_LINES)

    def emit(self, percent: float) -> None:
        """Forward progress to the handler; never goes backwards."""
        percent = min(100.0, percent)
        if percent < self.progress or (percent == self.progress and percent > 0):
            return
        self.progress = percent
        if self.handler is None:
            return
        try:
            self.handler(percent)
        except Exception as e:
            logger.warning("Progress handler error: %s", e)

    def on_log(self, line: str) -> None:
        self.stderr_tail.append(line)
        logger.debug("[ffmpeg %s] %s", self.format.value, line)

    def tail(self) -> str:
        return "\n".join(self.stderr_tail)
