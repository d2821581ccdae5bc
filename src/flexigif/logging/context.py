"""Job context for structured logging.

Conversion jobs run on worker threads. The session id and output format
of the job are kept in contextvars so every log record emitted while the
job runs can be tagged without threading them through each call.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_job_format: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_format", default=None
)
_file_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_name", default=None
)


@contextmanager
def job_context(
    session_id: str,
    job_format: str | None = None,
    file_name: str | None = None,
) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with job identifiers.

    The previous context is restored on exit, so blocks may nest.

    Example:
        with job_context("a1b2c3", "gif", "clip.mp4"):
            logger.info("Converting")  # [a1b2c3:gif] Converting
    """
    tokens = (
        _session_id.set(session_id),
        _job_format.set(job_format),
        _file_name.set(file_name),
    )
    try:
        yield
    finally:
        _file_name.reset(tokens[2])
        _job_format.reset(tokens[1])
        _session_id.reset(tokens[0])


def get_job_context() -> tuple[str | None, str | None, str | None]:
    """Return (session_id, job_format, file_name); any may be None."""
    return _session_id.get(), _job_format.get(), _file_name.get()


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds session_id, job_format and file_name attributes, plus a compact
    job_tag such as ``[a1b2c3:gif] `` for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        session_id, job_format, file_name = get_job_context()

        record.session_id = session_id
        record.job_format = job_format
        record.file_name = file_name

        if session_id:
            if job_format:
                record.job_tag = f"[{session_id}:{job_format}] "
            else:
                record.job_tag = f"[{session_id}] "
        else:
            record.job_tag = ""

        return True
