"""Structured logging for FlexiGif.

Text or JSON output, optional rotating log file, and per-job context
tagging for conversions running on worker threads.
"""

from flexigif.logging.config import (
    build_logging_config,
    configure_logging,
    configure_logging_from_cli,
)
from flexigif.logging.context import JobContextFilter, get_job_context, job_context
from flexigif.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "build_logging_config",
    "configure_logging",
    "configure_logging_from_cli",
    "get_job_context",
    "job_context",
]
