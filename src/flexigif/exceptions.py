"""Exception hierarchy for FlexiGif.

All domain errors inherit from FlexiGifError so callers can catch every
FlexiGif failure with a single except clause. Each error kind carries a
message_key into flexigif.messages; user_message() turns any exception
into a localized string for the end user, distinct per error kind.

Propagation: the metadata analyzer and conversion engines raise these to
their callers. ConversionSession is the only component that catches every
job-level failure and turns it into a terminal job state.
"""

from __future__ import annotations

from flexigif.core.formatting import format_file_size
from flexigif.messages import get_message


class FlexiGifError(Exception):
    """Base exception for FlexiGif errors."""

    message_key: str = "error.unknown"

    def message_params(self) -> dict[str, object]:
        """Parameters for the localized message template."""
        return {}


# =============================================================================
# Validation (user-correctable, fail fast)
# =============================================================================


class ValidationError(FlexiGifError):
    """Raised when an input file or its metadata is not acceptable."""

    message_key = "error.validation"


class DurationExceeded(ValidationError):
    """Raised when a video is longer than the configured maximum.

    Attributes:
        duration: Actual duration in seconds.
        max_duration: Allowed maximum in seconds.
    """

    message_key = "error.duration_exceeded"

    def __init__(self, duration: float, max_duration: float) -> None:
        self.duration = duration
        self.max_duration = max_duration
        super().__init__(
            f"Duration {duration:.2f}s exceeds maximum of {max_duration:g}s"
        )

    def message_params(self) -> dict[str, object]:
        return {"max_duration": self.max_duration}


class DurationTooShort(ValidationError):
    """Raised when a video is shorter than the configured minimum.

    Attributes:
        duration: Actual duration in seconds.
        min_duration: Required minimum in seconds.
    """

    message_key = "error.duration_too_short"

    def __init__(self, duration: float, min_duration: float) -> None:
        self.duration = duration
        self.min_duration = min_duration
        super().__init__(
            f"Duration {duration:.2f}s is below minimum of {min_duration:g}s"
        )

    def message_params(self) -> dict[str, object]:
        return {"min_duration": self.min_duration}


class FileTooLarge(ValidationError):
    """Raised when an uploaded file exceeds the size limit."""

    message_key = "error.file_too_large"

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(f"File size {size} exceeds maximum of {max_size} bytes")

    def message_params(self) -> dict[str, object]:
        return {"max_size": format_file_size(self.max_size)}


class FileTooSmall(ValidationError):
    """Raised when an uploaded file is below the minimum size."""

    message_key = "error.file_too_small"

    def __init__(self, size: int, min_size: int) -> None:
        self.size = size
        self.min_size = min_size
        super().__init__(f"File size {size} is below minimum of {min_size} bytes")


class UnsupportedFormat(ValidationError):
    """Raised when an uploaded file has an unsupported MIME type."""

    message_key = "error.unsupported_format"

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__(f"Unsupported MIME type: {mime_type or '(none)'}")


# =============================================================================
# Metadata analysis (session-level, caller may proceed without metadata)
# =============================================================================


class AnalysisTimeout(FlexiGifError):
    """Raised when no metadata arrives within the bounded wait."""

    message_key = "error.analysis_timeout"

    def __init__(self, name: str, timeout: float) -> None:
        self.name = name
        self.timeout = timeout
        super().__init__(f"Metadata analysis of {name} timed out after {timeout:g}s")


class LoadError(FlexiGifError):
    """Raised when a video resource cannot be decoded at all."""

    message_key = "error.load_error"


# =============================================================================
# Conversion engine
# =============================================================================


class EnvironmentUnsupported(FlexiGifError):
    """Raised when a required execution capability is missing.

    Fatal for the session; retrying in the same environment will not help.
    """

    message_key = "error.environment_unsupported"


class InitializationFailed(FlexiGifError):
    """Raised when the transcode executable fails to load. Retryable.

    Attributes:
        cause: The underlying exception.
    """

    message_key = "error.initialization_failed"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ExecutionFailed(FlexiGifError):
    """Raised when a transcode invocation reports failure. Job-scoped.

    Attributes:
        returncode: Exit code of the invocation, None if it raised.
        stderr_tail: Last lines of the executable's log output.
    """

    message_key = "error.execution_failed"

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stderr_tail: str = "",
    ) -> None:
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        super().__init__(message)


class DecodeFailed(FlexiGifError):
    """Raised when the output artifact cannot be read back. Job-scoped."""

    message_key = "error.decode_failed"


class ConversionTimeout(FlexiGifError):
    """Raised when a conversion exceeds its adaptive deadline.

    Job-scoped; sibling jobs are not affected.
    """

    message_key = "error.conversion_timeout"

    def __init__(self, timeout: float, description: str = "conversion") -> None:
        self.timeout = timeout
        self.description = description
        super().__init__(f"{description} timed out after {timeout:g}s")


class ConversionCancelled(FlexiGifError):
    """Raised or recorded when the user cancels before a job starts."""

    message_key = "error.cancelled"


def user_message(exc: BaseException, locale: str | None = None) -> str:
    """Return a localized, human-readable description of an exception.

    Never exposes raw internal messages: exceptions outside the FlexiGif
    hierarchy map to a generic message.

    Args:
        exc: The exception to describe.
        locale: Locale code, None for the default.

    Returns:
        Localized message distinct per error kind.
    """
    if isinstance(exc, FlexiGifError):
        return get_message(exc.message_key, locale, **exc.message_params())
    return get_message("error.unknown", locale)
