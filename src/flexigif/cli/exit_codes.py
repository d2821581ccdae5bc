"""Process exit codes for the flexigif CLI."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes returned by flexigif commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    TARGET_NOT_FOUND = 2
    VALIDATION_ERROR = 3
    ANALYSIS_ERROR = 4
    TOOL_NOT_FOUND = 5
    CONVERSION_FAILED = 6
    CONFIG_ERROR = 7
    INTERRUPTED = 130
