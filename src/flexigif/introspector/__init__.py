"""Video metadata analysis and upload validation."""

from flexigif.introspector.analyzer import (
    MetadataAnalyzer,
    infer_codec,
    infer_frame_rate,
)
from flexigif.introspector.ffprobe import FFprobeProbe, parse_ffprobe_output
from flexigif.introspector.interface import ContainerInfo, MetadataProbe
from flexigif.introspector.validation import SUPPORTED_MIME_TYPES, validate_file

__all__ = [
    "ContainerInfo",
    "FFprobeProbe",
    "MetadataAnalyzer",
    "MetadataProbe",
    "SUPPORTED_MIME_TYPES",
    "infer_codec",
    "infer_frame_rate",
    "parse_ffprobe_output",
    "validate_file",
]
