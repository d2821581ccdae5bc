"""Shared test fixtures for FlexiGif."""

from __future__ import annotations

import logging
import shutil
import tempfile
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from flexigif.config import clear_config_cache
from flexigif.domain.models import VideoFile, VideoMetadata
from flexigif.introspector.interface import ContainerInfo


class FakeBackend:
    """In-memory TranscodeBackend.

    exec() "produces" the file named by its last argument, reports the
    configured progress fractions and returns the next exit code.
    Handlers are kept per calling thread, like FFmpegBackend.
    """

    def __init__(
        self,
        *,
        load_error: BaseException | None = None,
        exit_codes: Iterable[int] = (),
        exec_error: BaseException | None = None,
        output: bytes = b"GIF89a-fake-output",
        progress_steps: Iterable[float] = (0.25, 0.5, 1.0),
        exec_delay: float = 0.0,
        write_outputs: bool = True,
    ) -> None:
        self.load_error = load_error
        self.exit_codes = list(exit_codes)
        self.exec_error = exec_error
        self.output = output
        self.progress_steps = tuple(progress_steps)
        self.exec_delay = exec_delay
        self.write_outputs = write_outputs

        self.files: dict[str, bytes] = {}
        self.load_calls = 0
        self.exec_calls: list[list[str]] = []
        self.written: list[str] = []
        self.deleted: list[str] = []
        self._loaded = False
        self._handlers = threading.local()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error
        self._loaded = True

    def write_file(self, name: str, data: bytes) -> None:
        self.written.append(name)
        self.files[name] = data

    def read_file(self, name: str) -> bytes:
        try:
            return self.files[name]
        except KeyError:
            raise FileNotFoundError(name) from None

    def delete_file(self, name: str) -> None:
        self.deleted.append(name)
        self.files.pop(name, None)

    def exec(self, args: list[str]) -> int:
        self.exec_calls.append(list(args))
        progress_handler = getattr(self._handlers, "progress", None)
        log_handler = getattr(self._handlers, "log", None)
        if self.exec_delay:
            time.sleep(self.exec_delay)
        if self.exec_error is not None:
            raise self.exec_error
        if log_handler is not None:
            log_handler(f"frame=1 time=00:00:01.00 args={len(args)}")
        for step in self.progress_steps:
            if progress_handler is not None:
                progress_handler(step)
        returncode = self.exit_codes.pop(0) if self.exit_codes else 0
        if returncode == 0 and self.write_outputs:
            self.files[args[-1]] = self.output
        return returncode

    def set_progress_handler(self, handler: Callable[[float], None] | None) -> None:
        self._handlers.progress = handler

    def set_log_handler(self, handler: Callable[[str], None] | None) -> None:
        self._handlers.log = handler


class FakeProbe:
    """MetadataProbe returning fixed container info."""

    def __init__(
        self,
        info: ContainerInfo | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.info = info or ContainerInfo(duration=8.0, width=1280, height=720)
        self.error = error
        self.probed: list[Path] = []
        self.existed: list[bool] = []

    def probe(self, path: Path, timeout: float) -> ContainerInfo:
        self.probed.append(path)
        self.existed.append(path.exists())
        if self.error is not None:
            raise self.error
        return self.info


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Keep the process-wide config cache from leaking between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """Factory for in-memory transcode backends."""
    return FakeBackend


@pytest.fixture
def make_probe() -> Callable[..., FakeProbe]:
    """Factory for fake metadata probes."""
    return FakeProbe


@pytest.fixture
def video_file() -> VideoFile:
    """A 2 MiB memory-backed mp4 upload."""
    return VideoFile.from_bytes("clip.mp4", b"\x00" * (2 * 1024 * 1024))


@pytest.fixture
def metadata() -> VideoMetadata:
    """Metadata of an 8 second 720p clip."""
    return VideoMetadata(
        duration=8.0,
        width=1280,
        height=720,
        fps=30,
        size=2 * 1024 * 1024,
        codec="h264",
    )


@pytest.fixture
def video_on_disk(temp_dir: Path) -> Path:
    """A 4 KiB file named like an mp4 video."""
    path = temp_dir / "holiday.mp4"
    path.write_bytes(b"\x00" * 4096)
    return path


@pytest.fixture
def restore_root_logger():
    """Undo handler changes made by configure_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
