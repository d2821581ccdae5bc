"""Deadline race for blocking operations."""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import TypeVar

from flexigif.exceptions import ConversionTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


def first_to_settle(
    operation: Callable[[], T],
    timeout: float,
    description: str = "operation",
) -> T:
    """Run operation on a worker thread and wait at most timeout seconds.

    Whichever settles first wins: the operation's result or exception, or
    the timer. A losing operation is abandoned, not interrupted; it keeps
    running on its worker thread until it finishes on its own.

    The operation runs in a copy of the caller's context, so contextvars
    such as the logging job context carry over.

    Raises:
        ConversionTimeout: If the timer settles first.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="flexigif-race")
    context = contextvars.copy_context()
    try:
        future = executor.submit(context.run, operation)
        try:
            return future.result(timeout=timeout)
        except FuturesTimeoutError as e:
            logger.warning("%s timed out after %gs", description, timeout)
            raise ConversionTimeout(timeout, description) from e
    finally:
        executor.shutdown(wait=False)
