"""Per-engine output estimates.

These are the quick figures shown next to the settings form. They use
their own heuristics, independent of the metadata-only size estimates in
flexigif.estimation.model.
"""

from __future__ import annotations

from flexigif.config.models import MIB
from flexigif.domain.enums import WebMCodec
from flexigif.domain.models import (
    EstimateResult,
    GifSettings,
    VideoFile,
    VideoMetadata,
    WebMSettings,
)
from flexigif.messages import get_message

GIF_BYTES_PER_PIXEL = 0.5
GIF_DEFAULT_FPS = 30
GIF_WARNING_BYTES = 50 * MIB

WEBM_WARNING_MB = 100

# Seconds per MB of input
_CODEC_TIME_FACTORS = {WebMCodec.VP9: 2.0, WebMCodec.VP8: 1.5}


def webm_compression_ratio(crf: int) -> float:
    """Expected output/input size ratio for a CRF value."""
    if crf > 35:
        return 0.4
    if crf > 25:
        return 0.6
    return 0.7


def estimate_gif_output(
    metadata: VideoMetadata,
    settings: GifSettings,
    locale: str | None = None,
) -> EstimateResult:
    """Estimate GIF output size (MB) and processing time (s)."""
    width = settings.width or metadata.width
    height = settings.height or metadata.height
    fps = settings.fps or GIF_DEFAULT_FPS
    size_bytes = width * height * metadata.duration * fps * GIF_BYTES_PER_PIXEL

    warnings: tuple[str, ...] = ()
    if size_bytes > GIF_WARNING_BYTES:
        warnings = (get_message("estimate.gif_too_large", locale),)

    return EstimateResult(
        estimated_size=round(size_bytes / MIB, 1),
        estimated_time=round(metadata.duration * 2),
        warnings=warnings,
    )


def estimate_webm_output(
    file: VideoFile,
    settings: WebMSettings,
    locale: str | None = None,
) -> EstimateResult:
    """Estimate WebM output size (MB) and processing time (s) from the input size.

    The size is reported to 0.1 MB; the large-output warning compares the
    unrounded size against the threshold.
    """
    size_mb = file.size * webm_compression_ratio(settings.crf) / MIB
    input_mb = file.size / MIB

    warnings: tuple[str, ...] = ()
    if size_mb > WEBM_WARNING_MB:
        warnings = (get_message("estimate.webm_too_large", locale),)

    return EstimateResult(
        estimated_size=round(size_mb, 1),
        estimated_time=round(round(input_mb) * _CODEC_TIME_FACTORS[settings.codec]),
        warnings=warnings,
    )
