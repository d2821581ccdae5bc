"""FFprobe-based implementation of the MetadataProbe protocol."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path
from typing import Any

from flexigif.core.subprocess_utils import run_command
from flexigif.exceptions import AnalysisTimeout, EnvironmentUnsupported, LoadError
from flexigif.introspector.interface import ContainerInfo

logger = logging.getLogger(__name__)


def parse_ffprobe_output(path: Path, data: dict[str, Any]) -> ContainerInfo:
    """Extract duration and frame size from ffprobe JSON output.

    Duration is taken from the container, falling back to the video
    stream's own duration.

    Raises:
        LoadError: If there is no video stream or a field is missing or
            not numeric.
    """
    streams = data.get("streams") or []
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    if video is None:
        raise LoadError(f"No video stream in {path.name}")

    raw_duration = (data.get("format") or {}).get("duration") or video.get(
        "duration"
    )
    try:
        duration = float(raw_duration)
        width = int(video["width"])
        height = int(video["height"])
    except (TypeError, ValueError, KeyError) as e:
        raise LoadError(f"Unreadable metadata in {path.name}: {e}") from e

    return ContainerInfo(duration=duration, width=width, height=height)


class FFprobeProbe:
    """ffprobe-based implementation of the MetadataProbe protocol."""

    def __init__(self, ffprobe_path: Path | None = None) -> None:
        """Initialize the probe.

        Args:
            ffprobe_path: Explicit path to ffprobe. If not provided, ffprobe
                is looked up in PATH.

        Raises:
            EnvironmentUnsupported: If ffprobe is not available.
        """
        if ffprobe_path is None:
            found = shutil.which("ffprobe")
            ffprobe_path = Path(found) if found else None
        if ffprobe_path is None:
            raise EnvironmentUnsupported(
                "ffprobe is not installed or not in PATH. Install ffmpeg or "
                "set FLEXIGIF_FFPROBE_PATH / [tools] ffprobe in "
                "~/.flexigif/config.toml"
            )
        self._ffprobe_path = ffprobe_path

    def probe(self, path: Path, timeout: float) -> ContainerInfo:
        try:
            stdout, stderr, returncode = run_command(
                [
                    self._ffprobe_path,
                    "-v",
                    "error",
                    "-print_format",
                    "json",
                    "-show_streams",
                    "-show_format",
                    path,
                ],
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise AnalysisTimeout(path.name, timeout) from e
        except OSError as e:
            raise EnvironmentUnsupported(f"Cannot run ffprobe: {e}") from e

        if returncode != 0:
            raise LoadError(
                f"ffprobe failed for {path.name} (exit {returncode}): "
                f"{stderr.strip()[-500:]}"
            )

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise LoadError(f"Invalid ffprobe output for {path.name}: {e}") from e

        info = parse_ffprobe_output(path, data)
        logger.debug(
            "Probed %s: %.2fs %dx%d",
            path.name,
            info.duration,
            info.width,
            info.height,
        )
        return info
