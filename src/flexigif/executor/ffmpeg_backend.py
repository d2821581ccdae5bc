"""FFmpeg implementation of the TranscodeBackend protocol.

The backend owns a private temporary directory that serves as the file
namespace for a conversion: inputs are written into it, ffmpeg runs with
it as the working directory, and outputs are read back from it.
"""

from __future__ import annotations

import logging
import queue
import shutil
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import tempfile
import threading
from pathlib import Path

from flexigif.core.subprocess_utils import run_command
from flexigif.exceptions import EnvironmentUnsupported, InitializationFailed
from flexigif.executor.ffmpeg_progress import ProgressTracker
from flexigif.executor.interface import BackendProgressHandler, LogHandler

logger = logging.getLogger(__name__)

# Flags prepended to every invocation
GLOBAL_ARGS: tuple[str, ...] = ("-y", "-hide_banner", "-nostdin")

VERSION_CHECK_TIMEOUT = 30.0

TERMINATE_GRACE_SECONDS = 5.0


class FFmpegBackend:
    """Run ffmpeg against files in a private workspace directory.

    Args:
        ffmpeg_path: Explicit ffmpeg path; looked up in PATH when None.
        workspace_parent: Directory to create the workspace in; the
            system temp directory when None.
    """

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        workspace_parent: Path | None = None,
    ) -> None:
        self._configured_path = ffmpeg_path
        self._workspace_parent = workspace_parent
        self._ffmpeg_path: Path | None = None
        self._workspace: Path | None = None
        # Handlers are registered per calling thread, see TranscodeBackend
        self._handlers = threading.local()
        self._processes: set[subprocess.Popen[str]] = set()
        self._processes_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._ffmpeg_path is not None and self._workspace is not None

    @property
    def workspace(self) -> Path | None:
        """Workspace directory, None before load()."""
        return self._workspace

    def load(self) -> None:
        """Resolve and verify ffmpeg, then create the workspace.

        Raises:
            EnvironmentUnsupported: If ffmpeg is missing or the workspace
                cannot be created.
            InitializationFailed: If ``ffmpeg -version`` fails.
        """
        if self.loaded:
            return

        ffmpeg_path = self._configured_path
        if ffmpeg_path is None:
            found = shutil.which("ffmpeg")
            ffmpeg_path = Path(found) if found else None
        if ffmpeg_path is None:
            raise EnvironmentUnsupported(
                "ffmpeg is not installed or not in PATH. Install ffmpeg or set "
                "FLEXIGIF_FFMPEG_PATH / [tools] ffmpeg in ~/.flexigif/config.toml"
            )

        try:
            stdout, stderr, returncode = run_command(
                [ffmpeg_path, "-version"], timeout=VERSION_CHECK_TIMEOUT
            )
        except FileNotFoundError as e:
            raise EnvironmentUnsupported(f"ffmpeg not found at {ffmpeg_path}") from e
        if returncode != 0:
            raise InitializationFailed(
                f"ffmpeg -version exited with {returncode}: {stderr.strip()[-200:]}"
            )
        logger.debug("Using %s", stdout.splitlines()[0] if stdout else ffmpeg_path)

        try:
            workspace = Path(
                tempfile.mkdtemp(prefix="flexigif-", dir=self._workspace_parent)
            )
        except OSError as e:
            raise EnvironmentUnsupported(f"Cannot create workspace: {e}") from e

        self._ffmpeg_path = ffmpeg_path
        self._workspace = workspace
        logger.debug("FFmpeg backend loaded, workspace %s", workspace)

    def close(self) -> None:
        """Stop running ffmpeg processes and remove the workspace.

        A conversion abandoned after a timeout may still be running; its
        process is terminated here so nothing outlives the session.
        """
        self._terminate_running()
        if self._workspace is not None:
            shutil.rmtree(self._workspace, ignore_errors=True)
            logger.debug("Removed workspace %s", self._workspace)
        self._workspace = None
        self._ffmpeg_path = None

    def __enter__(self) -> FFmpegBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _resolve(self, name: str) -> Path:
        """Map a namespace name to a workspace path."""
        if self._workspace is None:
            raise RuntimeError("FFmpeg backend is not loaded")
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"Invalid workspace file name: {name!r}")
        return self._workspace / name

    def write_file(self, name: str, data: bytes) -> None:
        self._resolve(name).write_bytes(data)

    def read_file(self, name: str) -> bytes:
        return self._resolve(name).read_bytes()

    def delete_file(self, name: str) -> None:
        self._resolve(name).unlink(missing_ok=True)

    def set_progress_handler(self, handler: BackendProgressHandler | None) -> None:
        self._handlers.progress = handler

    def set_log_handler(self, handler: LogHandler | None) -> None:
        self._handlers.log = handler

    def exec(self, args: list[str]) -> int:
        """Run ffmpeg with args in the workspace.

        stderr is read on a separate thread; each line goes to the log
        handler and advances progress. Both handlers are the ones the
        calling thread registered.

        Returns:
            ffmpeg's exit code.

        Raises:
            OSError: If the process cannot be started.
        """
        if not self.loaded:
            raise RuntimeError("FFmpeg backend is not loaded")

        progress_handler: BackendProgressHandler | None = getattr(
            self._handlers, "progress", None
        )
        log_handler: LogHandler | None = getattr(self._handlers, "log", None)

        cmd = [str(self._ffmpeg_path), *GLOBAL_ARGS, *args]
        logger.debug("Executing: %s", " ".join(cmd))

        process = subprocess.Popen(  # nosec B603 - args are built internally
            cmd,
            cwd=self._workspace,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        with self._processes_lock:
            self._processes.add(process)

        lines: queue.Queue[str | None] = queue.Queue()

        def read_stderr() -> None:
            try:
                assert process.stderr is not None
                for line in process.stderr:
                    lines.put(line)
            except (ValueError, OSError) as e:
                logger.debug("Stderr reader stopped: %s", e)
            finally:
                lines.put(None)

        reader_thread = threading.Thread(target=read_stderr, daemon=True)
        reader_thread.start()

        tracker = ProgressTracker()
        try:
            while True:
                line = lines.get()
                if line is None:
                    break
                line = line.rstrip()
                if not line:
                    continue
                if log_handler is not None:
                    log_handler(line)
                fraction = tracker.feed(line)
                if fraction is not None and progress_handler is not None:
                    progress_handler(fraction)
            returncode = process.wait()
        finally:
            with self._processes_lock:
                self._processes.discard(process)
        reader_thread.join(timeout=2.0)
        logger.debug("ffmpeg exited with %d", returncode)
        return returncode

    def _terminate_running(self) -> None:
        with self._processes_lock:
            running = list(self._processes)
        for process in running:
            if process.poll() is not None:
                continue
            logger.info("Terminating ffmpeg process %d", process.pid)
            process.terminate()
            try:
                process.wait(timeout=TERMINATE_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
