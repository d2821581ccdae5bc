"""Video metadata analysis.

Duration and frame size are measured by a MetadataProbe. Frame rate and
codec are inferred from the container extension; this is a heuristic,
not a measurement.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from flexigif.config.models import LimitsConfig
from flexigif.domain.models import FULL_HD_PIXELS, VideoFile, VideoMetadata
from flexigif.exceptions import (
    AnalysisTimeout,
    DurationExceeded,
    DurationTooShort,
    LoadError,
)
from flexigif.introspector.interface import MetadataProbe
from flexigif.messages import get_message

logger = logging.getLogger(__name__)

DEFAULT_FPS = 30
_FPS_BY_EXTENSION = {"avi": 25}

_CODEC_BY_EXTENSION = {
    "mp4": "h264",
    "mov": "h264",
    "m4v": "h264",
    "mkv": "h264",
    "avi": "mpeg4",
    "webm": "vp9",
}

MIN_WIDTH = 320
MIN_HEIGHT = 240
LONG_DURATION_SECONDS = 60


def infer_frame_rate(extension: str) -> int:
    """Frame rate assumed for a container extension."""
    return _FPS_BY_EXTENSION.get(extension.casefold(), DEFAULT_FPS)


def infer_codec(extension: str) -> str:
    """Codec assumed for a container extension, or "unknown"."""
    return _CODEC_BY_EXTENSION.get(extension.casefold(), "unknown")


class MetadataAnalyzer:
    """Produce validated VideoMetadata for an uploaded file.

    Args:
        probe: Container metadata probe.
        limits: Duration bounds and analysis timeout.
        locale: Locale for advisory warnings.
    """

    def __init__(
        self,
        probe: MetadataProbe,
        limits: LimitsConfig | None = None,
        locale: str | None = None,
    ) -> None:
        self.probe = probe
        self.limits = limits or LimitsConfig()
        self.locale = locale

    def analyze(self, file: VideoFile) -> VideoMetadata:
        """Measure, infer and validate metadata for file.

        Raises:
            AnalysisTimeout: If probing exceeds limits.analysis_timeout.
            LoadError: If the file cannot be decoded.
            DurationTooShort: If the video is shorter than the minimum.
            DurationExceeded: If the video is longer than the maximum.
        """
        with self._local_path(file) as path:
            info = self.probe.probe(path, self.limits.analysis_timeout)

        extension = file.extension
        metadata = VideoMetadata(
            duration=info.duration,
            width=info.width,
            height=info.height,
            fps=infer_frame_rate(extension),
            size=file.size,
            codec=infer_codec(extension),
        )
        logger.info(
            "Analyzed %s: %.2fs %dx%d, %s",
            file.name,
            metadata.duration,
            metadata.width,
            metadata.height,
            metadata.codec,
        )
        return self.validate_metadata(metadata)

    def analyze_or_none(self, file: VideoFile) -> VideoMetadata | None:
        """Like analyze(), but return None when the file cannot be analyzed.

        Only timeouts and undecodable input are absorbed; validation
        errors still propagate.
        """
        try:
            return self.analyze(file)
        except (AnalysisTimeout, LoadError) as e:
            logger.warning("Proceeding without metadata for %s: %s", file.name, e)
            return None

    def validate_metadata(self, metadata: VideoMetadata) -> VideoMetadata:
        """Check duration bounds and attach advisory warnings.

        Returns:
            A copy of metadata with warnings set.

        Raises:
            LoadError: If the frame size is not positive.
            DurationTooShort: If duration < limits.min_duration.
            DurationExceeded: If duration > limits.max_duration.
        """
        if metadata.width <= 0 or metadata.height <= 0:
            raise LoadError(
                f"Invalid frame size {metadata.width}x{metadata.height}"
            )
        if metadata.duration < self.limits.min_duration:
            raise DurationTooShort(metadata.duration, self.limits.min_duration)
        if metadata.duration > self.limits.max_duration:
            raise DurationExceeded(metadata.duration, self.limits.max_duration)

        warnings: list[str] = []
        if metadata.pixels > FULL_HD_PIXELS:
            warnings.append(get_message("metadata.high_resolution", self.locale))
        if metadata.width < MIN_WIDTH or metadata.height < MIN_HEIGHT:
            warnings.append(get_message("metadata.low_resolution", self.locale))
        if metadata.duration > LONG_DURATION_SECONDS:
            warnings.append(get_message("metadata.long_duration", self.locale))

        return dataclasses.replace(metadata, warnings=tuple(warnings))

    @contextmanager
    def _local_path(self, file: VideoFile) -> Iterator[Path]:
        """Yield a host path for file, spilling memory-backed data to a temp file."""
        if file.path is not None:
            yield file.path
            return

        fd, name = tempfile.mkstemp(
            prefix="flexigif-probe-", suffix=f".{file.extension}"
        )
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(file.read_bytes())
            logger.debug("Spilled %s to %s for probing", file.name, path)
            yield path
        finally:
            path.unlink(missing_ok=True)
