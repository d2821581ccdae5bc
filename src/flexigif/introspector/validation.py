"""Upload boundary checks on raw video files."""

from __future__ import annotations

from flexigif.config.models import LimitsConfig
from flexigif.domain.models import VideoFile
from flexigif.exceptions import FileTooLarge, FileTooSmall, UnsupportedFormat

SUPPORTED_MIME_TYPES: frozenset[str] = frozenset(
    {
        "video/mp4",
        "video/mov",
        "video/quicktime",
        "video/avi",
        "video/x-msvideo",
    }
)


def validate_file(file: VideoFile, limits: LimitsConfig | None = None) -> None:
    """Reject files outside the accepted size range or MIME types.

    Raises:
        FileTooLarge: If file.size exceeds limits.max_file_size.
        FileTooSmall: If file.size is below limits.min_file_size.
        UnsupportedFormat: If the MIME type is not a supported video type.
    """
    limits = limits or LimitsConfig()
    if file.size > limits.max_file_size:
        raise FileTooLarge(file.size, limits.max_file_size)
    if file.size < limits.min_file_size:
        raise FileTooSmall(file.size, limits.min_file_size)
    if file.mime_type.casefold() not in SUPPORTED_MIME_TYPES:
        raise UnsupportedFormat(file.mime_type)
