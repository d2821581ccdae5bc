"""Heuristic size, time and timeout estimates.

All functions here are pure: the same metadata always yields the same
estimate. Size estimates are memoized in an EstimateCache owned by the
EstimationModel instance.
"""

from __future__ import annotations

import logging

from flexigif.config.models import MIB, TimeoutConfig
from flexigif.core.formatting import format_file_size
from flexigif.domain.enums import ConversionTimeClass, OutputFormat
from flexigif.domain.models import FULL_HD_PIXELS, VideoMetadata
from flexigif.estimation.cache import EstimateCache, make_cache_key

logger = logging.getLogger(__name__)

# GIF: bytes per pixel per frame before palette compression
GIF_BYTES_PER_PIXEL = 0.8
GIF_COMPRESSION = 0.3
GIF_HIGH_RES_PENALTY = 0.7

WEBM_BASE_RATIO = 0.6
LOW_RES_PIXELS = 720 * 480

# Seconds of processing per MB of input
BASE_RATES: dict[OutputFormat, dict[ConversionTimeClass, float]] = {
    OutputFormat.GIF: {
        ConversionTimeClass.FAST: 1.5,
        ConversionTimeClass.MEDIUM: 2.5,
        ConversionTimeClass.SLOW: 4.0,
    },
    OutputFormat.WEBM: {
        ConversionTimeClass.FAST: 0.5,
        ConversionTimeClass.MEDIUM: 1.0,
        ConversionTimeClass.SLOW: 2.0,
    },
}

MIN_PREDICTED_SECONDS = 10.0
MAX_PREDICTED_SECONDS = 600.0
MIN_COMPLEXITY_FACTOR = 0.1
MAX_COMPLEXITY_FACTOR = 2.0


def _clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def gif_size_bytes(metadata: VideoMetadata) -> float:
    """Predicted GIF size in bytes at the source frame rate and size."""
    frames = round(metadata.duration * metadata.fps)
    penalty = GIF_HIGH_RES_PENALTY if metadata.pixels > FULL_HD_PIXELS else 1.0
    return (
        metadata.pixels * frames * GIF_BYTES_PER_PIXEL * GIF_COMPRESSION * penalty
    )


def webm_complexity(metadata: VideoMetadata) -> float:
    """Weighted 0..1 complexity score from resolution, duration and fps."""
    return (
        0.5 * min(1.0, metadata.pixels / FULL_HD_PIXELS)
        + 0.3 * min(1.0, metadata.duration / 60)
        + 0.2 * min(1.0, metadata.fps / 60)
    )


def webm_size_bytes(metadata: VideoMetadata) -> float:
    """Predicted WebM size in bytes; never larger than the original."""
    ratio = WEBM_BASE_RATIO
    if metadata.duration > 30:
        ratio *= 0.8
    elif metadata.duration < 5:
        ratio *= 1.2

    ratio *= 1 + webm_complexity(metadata) * 0.3

    if metadata.pixels > FULL_HD_PIXELS:
        ratio *= 1.1
    elif metadata.pixels < LOW_RES_PIXELS:
        ratio *= 0.8

    return metadata.size * min(ratio, 1.0)


class EstimationModel:
    """Size, time and timeout heuristics.

    Args:
        timeouts: Bounds and multiplier for calculate_timeout().
        cache: Estimate cache; a private one is created when omitted.
    """

    def __init__(
        self,
        timeouts: TimeoutConfig | None = None,
        cache: EstimateCache | None = None,
    ) -> None:
        self.timeouts = timeouts or TimeoutConfig()
        self.cache = cache if cache is not None else EstimateCache()

    def estimate_gif_size(self, metadata: VideoMetadata) -> str:
        """Human-readable GIF size estimate, e.g. "12.4 MB"."""
        return self.cache.get_or_compute(
            make_cache_key("gif", metadata),
            lambda: format_file_size(gif_size_bytes(metadata)),
        )

    def estimate_webm_size(self, metadata: VideoMetadata) -> str:
        """Human-readable WebM size estimate, e.g. "3.1 MB"."""
        return self.cache.get_or_compute(
            make_cache_key("webm", metadata),
            lambda: format_file_size(webm_size_bytes(metadata)),
        )

    def estimate_size(self, fmt: OutputFormat, metadata: VideoMetadata) -> str:
        """Dispatch to the size estimate for fmt."""
        if fmt is OutputFormat.GIF:
            return self.estimate_gif_size(metadata)
        return self.estimate_webm_size(metadata)

    def estimate_sizes(self, metadata: VideoMetadata) -> dict[OutputFormat, str]:
        """Size estimates for every output format."""
        return {fmt: self.estimate_size(fmt, metadata) for fmt in OutputFormat}

    def predict_conversion_time(
        self,
        fmt: OutputFormat,
        metadata: VideoMetadata,
        quality_class: ConversionTimeClass = ConversionTimeClass.MEDIUM,
    ) -> float:
        """Predict processing time in seconds, within [10, 600]."""
        size_mb = metadata.size / MIB
        complexity_factor = _clamp(
            MIN_COMPLEXITY_FACTOR,
            MAX_COMPLEXITY_FACTOR,
            (metadata.pixels / FULL_HD_PIXELS)
            * (metadata.duration * 30 / 900)
            * (size_mb / 50),
        )
        seconds = size_mb * BASE_RATES[fmt][quality_class] * complexity_factor
        predicted = _clamp(MIN_PREDICTED_SECONDS, MAX_PREDICTED_SECONDS, seconds)
        logger.debug(
            "Predicted %s conversion time %.1fs (%s, complexity %.2f)",
            fmt.value,
            predicted,
            quality_class.value,
            complexity_factor,
        )
        return predicted

    def calculate_timeout(self, predicted_seconds: float) -> float:
        """Adaptive deadline in seconds for a predicted conversion time."""
        timeout = round(predicted_seconds * self.timeouts.multiplier)
        return _clamp(self.timeouts.min_seconds, self.timeouts.max_seconds, timeout)

    @property
    def max_timeout(self) -> float:
        """Deadline used when no metadata is available."""
        return self.timeouts.max_seconds

    def clear_cache(self) -> None:
        """Clear memoized size estimates."""
        self.cache.clear()
