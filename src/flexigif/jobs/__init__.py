"""Conversion sessions and progress observers."""

from flexigif.jobs.progress import (
    NullSessionObserver,
    SessionObserver,
    StderrProgressReporter,
)
from flexigif.jobs.race import first_to_settle
from flexigif.jobs.session import ConversionSession

__all__ = [
    "ConversionSession",
    "NullSessionObserver",
    "SessionObserver",
    "StderrProgressReporter",
    "first_to_settle",
]
