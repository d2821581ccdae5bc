"""Sequential multi-format conversion session.

A ConversionSession runs one job per requested output format, strictly
one after another in FORMAT_ORDER. It owns the job states: they are
created at the start of run() and mutated only here, under a lock,
because engine progress arrives on backend reader threads.

Job failures never escape run(). Each one becomes a terminal ERROR state
carrying a localized message, and the session moves on to the next job.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from flexigif.domain.enums import (
    FORMAT_ORDER,
    ConversionTimeClass,
    JobStatus,
    OutputFormat,
)
from flexigif.domain.models import (
    ConversionJobState,
    ConversionResults,
    GifSettings,
    OutputBlob,
    ResultMetadata,
    VideoFile,
    VideoMetadata,
    WebMSettings,
)
from flexigif.estimation.model import EstimationModel
from flexigif.exceptions import ConversionCancelled, user_message
from flexigif.executor.interface import EngineSet
from flexigif.jobs.progress import NullSessionObserver, SessionObserver
from flexigif.jobs.race import first_to_settle
from flexigif.logging.context import job_context
from flexigif.messages import get_message

logger = logging.getLogger(__name__)

# Formats whose conversion is raced against an adaptive deadline
TIMED_FORMATS: frozenset[OutputFormat] = frozenset({OutputFormat.WEBM})


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConversionSession:
    """Run conversions for one file across the requested formats.

    Args:
        engines: One engine per output format.
        estimator: Time prediction and timeout policy.
        observer: Receives progress and completion events.
        locale: Locale for job messages.
    """

    def __init__(
        self,
        engines: EngineSet,
        estimator: EstimationModel | None = None,
        observer: SessionObserver | None = None,
        locale: str | None = None,
    ) -> None:
        self.engines = engines
        self.estimator = estimator or EstimationModel()
        self.observer = observer or NullSessionObserver()
        self.locale = locale
        self.session_id = uuid.uuid4().hex[:6]
        self._jobs: dict[OutputFormat, ConversionJobState] = {}
        self._lock = threading.Lock()
        self._cancelled = False

    @property
    def jobs(self) -> dict[OutputFormat, ConversionJobState]:
        """Snapshot of the current job states."""
        with self._lock:
            return {fmt: dataclasses.replace(job) for fmt, job in self._jobs.items()}

    @property
    def overall_progress(self) -> float:
        """Mean progress of all jobs, 0-100."""
        with self._lock:
            return self._overall_progress()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def clear_estimate_cache(self) -> None:
        """Drop memoized size estimates."""
        self.estimator.clear_cache()

    def cancel(self) -> None:
        """Cancel jobs that have not started yet.

        A job already converting is not interrupted; it finishes or fails
        on its own. on_complete is not called for a cancelled session.
        """
        message = user_message(ConversionCancelled(), self.locale)
        with self._lock:
            self._cancelled = True
            for job in self._jobs.values():
                if job.status is JobStatus.PENDING:
                    job.status = JobStatus.ERROR
                    job.message = message
                    job.end_time = _now()
        logger.info("Session %s cancelled", self.session_id)

    def run(
        self,
        file: VideoFile,
        formats: Iterable[OutputFormat],
        gif_settings: GifSettings,
        webm_settings: WebMSettings,
        metadata: VideoMetadata | None = None,
        quality_class: ConversionTimeClass = ConversionTimeClass.MEDIUM,
    ) -> ConversionResults:
        """Convert file to every requested format, in FORMAT_ORDER.

        Args:
            file: The input video.
            formats: Requested output formats, in any order.
            gif_settings: Settings for the GIF job.
            webm_settings: Settings for the WebM job.
            metadata: Video metadata; without it WebM gets the maximum
                timeout and no time estimate is recorded.
            quality_class: Speed class used for time prediction.

        Returns:
            Results for the formats that completed. Never raises for a
            job failure.
        """
        requested = set(formats)
        pending = get_message("job.pending", self.locale)
        with self._lock:
            self._cancelled = False
            self._jobs = {
                fmt: ConversionJobState(format=fmt, message=pending)
                for fmt in FORMAT_ORDER
                if fmt in requested
            }

        logger.info(
            "Session %s started for %s: %s",
            self.session_id,
            file.name,
            ", ".join(fmt.value for fmt in self._jobs),
        )

        outputs: dict[OutputFormat, OutputBlob] = {}
        for fmt in list(self._jobs):
            if self._cancelled or self._jobs[fmt].is_terminal:
                continue
            settings = gif_settings if fmt is OutputFormat.GIF else webm_settings
            blob = self._run_job(file, fmt, settings, metadata, quality_class)
            if blob is not None:
                outputs[fmt] = blob

        results = self._build_results(file, outputs)
        if self._cancelled:
            logger.info("Session %s finished after cancellation", self.session_id)
        else:
            logger.info(
                "Session %s complete: %d/%d outputs",
                self.session_id,
                len(outputs),
                len(self._jobs),
            )
            self.observer.on_complete(results)
        return results

    def _run_job(
        self,
        file: VideoFile,
        fmt: OutputFormat,
        settings: GifSettings | WebMSettings,
        metadata: VideoMetadata | None,
        quality_class: ConversionTimeClass,
    ) -> OutputBlob | None:
        engine = self.engines[fmt]

        estimated_time: float | None = None
        timeout: float | None = None
        if metadata is not None:
            estimated_time = self.estimator.predict_conversion_time(
                fmt, metadata, quality_class
            )
        if fmt in TIMED_FORMATS:
            if estimated_time is None:
                timeout = self.estimator.max_timeout
            else:
                timeout = self.estimator.calculate_timeout(estimated_time)

        label = fmt.value.upper()
        started = self._update(
            fmt,
            status=JobStatus.PROCESSING,
            start_time=_now(),
            estimated_time=estimated_time,
            timeout_seconds=timeout,
            message=get_message("job.processing", self.locale, format=label),
        )
        if not started:
            return None

        job = self._jobs[fmt]
        engine.set_progress_handler(
            lambda percent: self._on_job_progress(fmt, job, percent)
        )
        try:
            with job_context(self.session_id, fmt.value, file.name):
                if timeout is not None:
                    blob = first_to_settle(
                        lambda: engine.convert(file, settings),
                        timeout,
                        f"{label} conversion",
                    )
                else:
                    blob = engine.convert(file, settings)
        except Exception as e:
            logger.warning(
                "%s job of session %s failed: %s", label, self.session_id, e
            )
            self._update(
                fmt,
                status=JobStatus.ERROR,
                end_time=_now(),
                message=user_message(e, self.locale),
            )
            return None
        finally:
            engine.set_progress_handler(None)

        self._update(
            fmt,
            status=JobStatus.COMPLETED,
            progress=100.0,
            end_time=_now(),
            message=get_message("job.completed", self.locale, format=label),
        )
        self._notify_progress(fmt)
        return blob

    def _update(self, fmt: OutputFormat, **changes: object) -> bool:
        """Apply changes to a job unless it is already terminal.

        Returns:
            False if the job was terminal and nothing changed.
        """
        with self._lock:
            job = self._jobs[fmt]
            if job.is_terminal:
                logger.debug(
                    "Ignoring update to terminal %s job: %s", fmt.value, changes
                )
                return False
            for name, value in changes.items():
                setattr(job, name, value)
            status = job.status
        logger.info("%s job -> %s", fmt.value.upper(), status.value)
        return True

    def _on_job_progress(
        self, fmt: OutputFormat, job: ConversionJobState, percent: float
    ) -> None:
        with self._lock:
            # Late updates from an abandoned conversion of an earlier run
            if self._jobs.get(fmt) is not job or job.is_terminal:
                return
            job.progress = max(job.progress, min(100.0, percent))
        self._notify_progress(fmt)

    def _notify_progress(self, fmt: OutputFormat) -> None:
        with self._lock:
            job_progress = self._jobs[fmt].progress
            overall = self._overall_progress()
        try:
            self.observer.on_progress(fmt, job_progress, overall)
        except Exception as e:
            logger.warning("Progress observer error: %s", e)

    def _overall_progress(self) -> float:
        if not self._jobs:
            return 0.0
        return sum(job.progress for job in self._jobs.values()) / len(self._jobs)

    def _build_results(
        self, file: VideoFile, outputs: dict[OutputFormat, OutputBlob]
    ) -> ConversionResults:
        original_size = file.size
        sizes = {
            fmt: outputs[fmt].size if fmt in outputs else 0 for fmt in OutputFormat
        }
        ratios = {
            fmt: (sizes[fmt] / original_size if original_size else 0.0)
            for fmt in OutputFormat
        }
        return ConversionResults(
            outputs=dict(outputs),
            metadata=ResultMetadata(
                original_size=original_size,
                sizes=sizes,
                compression_ratios=ratios,
            ),
        )
