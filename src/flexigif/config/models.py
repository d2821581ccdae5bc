"""Configuration data models.

This module defines dataclasses for FlexiGif configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

from flexigif.domain.models import QualityPreset
from flexigif.messages import MESSAGES

MIB = 1024 * 1024


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class LimitsConfig:
    """Domain limits for accepted input videos."""

    # Upload boundary
    max_file_size: int = 100 * MIB
    min_file_size: int = 1024

    # Duration bounds in seconds
    min_duration: float = 0.1
    max_duration: float = 300.0

    # Bounded wait for metadata analysis in seconds
    analysis_timeout: float = 10.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.min_file_size < 0 or self.max_file_size <= self.min_file_size:
            raise ValueError(
                "max_file_size must be greater than min_file_size, got "
                f"{self.max_file_size} <= {self.min_file_size}"
            )
        if self.min_duration <= 0 or self.max_duration <= self.min_duration:
            raise ValueError(
                "max_duration must be greater than min_duration > 0, got "
                f"min={self.min_duration}, max={self.max_duration}"
            )
        if self.analysis_timeout <= 0:
            raise ValueError(
                f"analysis_timeout must be positive, got {self.analysis_timeout}"
            )


@dataclass
class TimeoutConfig:
    """Bounds for adaptive conversion timeouts."""

    min_seconds: float = 60.0
    max_seconds: float = 900.0

    # Timeout = predicted time x multiplier
    multiplier: float = 2.5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.min_seconds <= 0 or self.max_seconds < self.min_seconds:
            raise ValueError(
                "timeouts must satisfy 0 < min_seconds <= max_seconds, got "
                f"min={self.min_seconds}, max={self.max_seconds}"
            )
        if self.multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got {self.multiplier}")


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class FlexiGifConfig:
    """Main configuration container for FlexiGif."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Locale for user-facing messages
    locale: str = "en"

    # Preset used when none is requested
    default_preset: str = "balanced"

    # Presets defined or overridden in the config file, by name
    presets: dict[str, QualityPreset] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.locale.casefold() not in MESSAGES:
            raise ValueError(
                f"locale must be one of {sorted(MESSAGES)}, got {self.locale}"
            )
