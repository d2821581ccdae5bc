"""Domain enums for FlexiGif.

This module contains the closed sets of values shared across the estimation,
conversion and recommendation modules.
"""

from enum import Enum


class OutputFormat(Enum):
    """Output formats a session can produce.

    The set is closed: every component that branches on format handles
    exactly these two members.
    """

    GIF = "gif"  # Animated image, maximum compatibility
    WEBM = "webm"  # Silent low-bitrate streaming video

    @property
    def mime_type(self) -> str:
        """Standard MIME type for the format's output artifact."""
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        """File extension used for the output artifact."""
        return self.value


_MIME_TYPES = {
    OutputFormat.GIF: "image/gif",
    OutputFormat.WEBM: "video/webm",
}

# Sessions always process formats in this order
FORMAT_ORDER: tuple[OutputFormat, ...] = (OutputFormat.GIF, OutputFormat.WEBM)


class QualityLevel(Enum):
    """GIF palette quality level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WebMCodec(Enum):
    """WebM video codec.

    VP9 is the higher quality (and slower) codec.
    """

    VP8 = "vp8"
    VP9 = "vp9"


class ConversionTimeClass(Enum):
    """Qualitative speed class of a quality preset."""

    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class JobStatus(Enum):
    """Status of one conversion job within a session.

    Transitions: PENDING -> PROCESSING -> COMPLETED | ERROR.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        """True once the job can no longer change."""
        return self in (JobStatus.COMPLETED, JobStatus.ERROR)


class Purpose(Enum):
    """What the user intends to do with the converted video."""

    SOCIAL = "social"
    WEBSITE = "website"
    BOTH = "both"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: "str | Purpose | None") -> "Purpose":
        """Parse a purpose string, mapping anything unrecognized to UNKNOWN."""
        if isinstance(value, Purpose):
            return value
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().casefold())
        except ValueError:
            return cls.UNKNOWN


class QualityPreference(Enum):
    """User preference between size and quality."""

    SIZE = "size"
    QUALITY = "quality"
    BALANCED = "balanced"


class EngineState(Enum):
    """Lifecycle state of a conversion engine's executable handle."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
