"""Bounded one-shot runs of the ffmpeg tools.

Used for ``ffprobe`` and ``ffmpeg -version``. Transcodes stream their
stderr through flexigif.executor.ffmpeg_backend instead.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg/ffprobe
import time
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    stdout: str
    stderr: str
    returncode: int


def run_command(args: Sequence[str | Path], timeout: float) -> CommandResult:
    """Run a tool to completion and capture its text output.

    Undecodable bytes in the output are replaced rather than raising.

    Raises:
        subprocess.TimeoutExpired: If the tool runs longer than timeout
            seconds. The child is killed first.
        OSError: If the executable cannot be started.
    """
    argv = [str(arg) for arg in args]
    tool = Path(argv[0]).name
    logger.debug("Running %s", " ".join(argv))

    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv is built internally
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s gave no answer within %gs", tool, timeout)
        raise

    logger.debug(
        "%s exited with %d after %.2fs",
        tool,
        completed.returncode,
        time.monotonic() - started,
    )
    return CommandResult(
        completed.stdout or "", completed.stderr or "", completed.returncode
    )
