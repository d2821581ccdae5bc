"""Domain types for FlexiGif.

Usage:
    from flexigif.domain import OutputFormat, VideoMetadata, GifSettings
"""

from flexigif.domain.enums import (
    FORMAT_ORDER,
    ConversionTimeClass,
    EngineState,
    JobStatus,
    OutputFormat,
    Purpose,
    QualityLevel,
    QualityPreference,
    WebMCodec,
)
from flexigif.domain.models import (
    FULL_HD_PIXELS,
    ConversionJobState,
    ConversionResults,
    EstimateResult,
    FormatRecommendation,
    GifSettings,
    OutputBlob,
    Platform,
    QualityPreset,
    ResultMetadata,
    UserIntent,
    VideoFile,
    VideoMetadata,
    WebMSettings,
)

__all__ = [
    # Enums
    "FORMAT_ORDER",
    "ConversionTimeClass",
    "EngineState",
    "JobStatus",
    "OutputFormat",
    "Purpose",
    "QualityLevel",
    "QualityPreference",
    "WebMCodec",
    # Models
    "FULL_HD_PIXELS",
    "ConversionJobState",
    "ConversionResults",
    "EstimateResult",
    "FormatRecommendation",
    "GifSettings",
    "OutputBlob",
    "Platform",
    "QualityPreset",
    "ResultMetadata",
    "UserIntent",
    "VideoFile",
    "VideoMetadata",
    "WebMSettings",
]
