"""JSON log formatter."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came from extra= or a filter
_STANDARD_ATTRS: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
}

# Attributes added by JobContextFilter, emitted under "job" rather than "context"
_JOB_ATTRS: tuple[str, ...] = ("session_id", "job_format", "file_name")


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Keys:
    - timestamp: ISO-8601 UTC time the record was created
    - level, message, logger
    - job: session_id/job_format/file_name when logged inside job_context()
    - context: remaining attributes passed through ``extra=``
    - exception: formatted traceback, if any
    """

    def format(self, record: logging.LogRecord) -> str:
        record_time = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": record_time.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.name and record.name != "root":
            entry["logger"] = record.name

        job = {
            key: getattr(record, key)
            for key in _JOB_ATTRS
            if getattr(record, key, None) is not None
        }
        if job:
            entry["job"] = job

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
            and key not in _JOB_ATTRS
            and key != "job_tag"
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)
