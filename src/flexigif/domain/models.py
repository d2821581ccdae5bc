"""Domain models for FlexiGif.

Value objects shared by every component. All of them are frozen dataclasses:
settings, metadata, estimates and results are never mutated after
construction. The one mutable record, ConversionJobState, is owned by the
session orchestrator.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from flexigif.domain.enums import (
    ConversionTimeClass,
    JobStatus,
    OutputFormat,
    Purpose,
    QualityLevel,
    QualityPreference,
    WebMCodec,
)

# Reference frame size used by several heuristics
FULL_HD_PIXELS = 1920 * 1080

DEFAULT_EXTENSION = "mp4"


@dataclass(frozen=True)
class VideoFile:
    """A raw uploaded video resource.

    Backed either by a file on the host filesystem or by bytes held in
    memory. Size and MIME type are assumed to be validated upstream
    (see flexigif.introspector.validation).
    """

    name: str
    size: int
    mime_type: str
    path: Path | None = None
    data: bytes | None = field(default=None, repr=False)

    @classmethod
    def from_path(cls, path: Path) -> VideoFile:
        """Build a file resource from a host path."""
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            size=path.stat().st_size,
            mime_type=mime_type or "application/octet-stream",
            path=path,
        )

    @classmethod
    def from_bytes(
        cls, name: str, data: bytes, mime_type: str | None = None
    ) -> VideoFile:
        """Build a memory-backed file resource."""
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(name)
            mime_type = guessed or "application/octet-stream"
        return cls(name=name, size=len(data), mime_type=mime_type, data=data)

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot, or DEFAULT_EXTENSION."""
        suffix = Path(self.name).suffix.lstrip(".").casefold()
        return suffix or DEFAULT_EXTENSION

    def read_bytes(self) -> bytes:
        """Return the full content of the resource."""
        if self.data is not None:
            return self.data
        if self.path is not None:
            return self.path.read_bytes()
        raise ValueError(f"File resource {self.name!r} has neither data nor path")


@dataclass(frozen=True)
class VideoMetadata:
    """Metadata of one input video.

    fps and codec are inferred from the container extension, not measured.
    """

    duration: float
    """Duration in seconds."""

    width: int
    height: int

    fps: int
    """Inferred frame rate."""

    size: int
    """Original file size in bytes."""

    codec: str
    """Inferred codec name, or "unknown"."""

    warnings: tuple[str, ...] = ()
    """Advisory warnings attached by metadata validation."""

    @property
    def pixels(self) -> int:
        """Pixels per frame."""
        return self.width * self.height


@dataclass(frozen=True)
class GifSettings:
    """Settings for the animated image conversion."""

    fps: int | None = 15
    """Output frame rate. None keeps the source rate."""

    width: int | None = None
    height: int | None = None
    quality: QualityLevel = QualityLevel.MEDIUM

    optimize: bool = True
    """Use the two-pass palette pipeline."""


@dataclass(frozen=True)
class WebMSettings:
    """Settings for the streaming video conversion."""

    crf: int = 25
    codec: WebMCodec = WebMCodec.VP8

    bitrate: str | None = None
    """Explicit target bitrate (e.g. "1M"), VP8 only."""

    fps: int | None = None
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class QualityPreset:
    """Named bundle of settings for both formats."""

    name: str
    label: str
    description: str
    gif_settings: GifSettings
    webm_settings: WebMSettings
    estimated_size_multiplier: float
    conversion_time: ConversionTimeClass


@dataclass(frozen=True)
class EstimateResult:
    """Predicted output of a single engine conversion."""

    estimated_size: float
    """Size in megabytes."""

    estimated_time: float
    """Processing time in seconds."""

    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class OutputBlob:
    """Opaque binary conversion output."""

    data: bytes = field(repr=False)
    mime_type: str

    @property
    def size(self) -> int:
        """Size in bytes."""
        return len(self.data)


@dataclass
class ConversionJobState:
    """State of one requested output format within a session.

    Owned by ConversionSession and mutated only through its update
    operations. Terminal once status is COMPLETED or ERROR.
    """

    format: OutputFormat
    status: JobStatus = JobStatus.PENDING
    progress: float = 0.0
    message: str = ""
    estimated_time: float | None = None
    timeout_seconds: float | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        """True if the job has completed or failed."""
        return self.status.is_terminal


@dataclass(frozen=True)
class ResultMetadata:
    """Size statistics of a finished session.

    Every format appears in sizes and compression_ratios; formats without
    an output carry 0 and 0.0.
    """

    original_size: int
    sizes: dict[OutputFormat, int]
    compression_ratios: dict[OutputFormat, float]


@dataclass(frozen=True)
class ConversionResults:
    """Outcome of a conversion session."""

    outputs: dict[OutputFormat, OutputBlob]
    metadata: ResultMetadata

    def get(self, fmt: OutputFormat) -> OutputBlob | None:
        """Return the output for a format, or None if it was not produced."""
        return self.outputs.get(fmt)


@dataclass(frozen=True)
class Platform:
    """A target sharing platform."""

    name: str
    max_file_size: int
    supported_formats: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserIntent:
    """What the user wants to do with the result."""

    purpose: Purpose
    platforms: tuple[Platform, ...] = ()
    quality_preference: QualityPreference = QualityPreference.BALANCED


@dataclass(frozen=True)
class FormatRecommendation:
    """Advisory format choice for a video and intent."""

    primary: OutputFormat
    reason: str
    secondary: OutputFormat | None = None
    warnings: tuple[str, ...] = ()
    estimated_sizes: dict[OutputFormat, str] = field(default_factory=dict)

    @property
    def formats(self) -> tuple[OutputFormat, ...]:
        """Recommended formats, primary first."""
        if self.secondary is None:
            return (self.primary,)
        return (self.primary, self.secondary)
