"""Shared pure helpers for FlexiGif."""

from flexigif.core.formatting import (
    format_duration,
    format_file_size,
    get_resolution_label,
)
from flexigif.core.subprocess_utils import CommandResult, run_command

__all__ = [
    "CommandResult",
    "format_duration",
    "format_file_size",
    "get_resolution_label",
    "run_command",
]
