"""Rendering of CLI results as human-readable text or JSON-ready dicts."""

from __future__ import annotations

from typing import Any

from flexigif.core.formatting import (
    format_duration,
    format_file_size,
    get_resolution_label,
)
from flexigif.domain.enums import OutputFormat
from flexigif.domain.models import (
    ConversionJobState,
    ConversionResults,
    EstimateResult,
    FormatRecommendation,
    GifSettings,
    QualityPreset,
    VideoMetadata,
    WebMSettings,
)


def metadata_to_dict(metadata: VideoMetadata) -> dict[str, Any]:
    return {
        "duration": metadata.duration,
        "width": metadata.width,
        "height": metadata.height,
        "fps": metadata.fps,
        "size": metadata.size,
        "codec": metadata.codec,
        "warnings": list(metadata.warnings),
    }


def format_metadata_human(name: str, metadata: VideoMetadata) -> str:
    lines = [
        f"File:       {name}",
        f"Duration:   {format_duration(metadata.duration)}",
        f"Resolution: {metadata.width}x{metadata.height} "
        f"({get_resolution_label(metadata.width, metadata.height)})",
        f"Frame rate: {metadata.fps} fps (inferred)",
        f"Codec:      {metadata.codec} (inferred)",
        f"Size:       {format_file_size(metadata.size)}",
    ]
    lines.extend(f"Warning:    {w}" for w in metadata.warnings)
    return "\n".join(lines)


def recommendation_to_dict(recommendation: FormatRecommendation) -> dict[str, Any]:
    return {
        "primary": recommendation.primary.value,
        "secondary": (
            recommendation.secondary.value if recommendation.secondary else None
        ),
        "reason": recommendation.reason,
        "warnings": list(recommendation.warnings),
        "estimated_sizes": {
            fmt.value: size for fmt, size in recommendation.estimated_sizes.items()
        },
    }


def format_recommendation_human(recommendation: FormatRecommendation) -> str:
    lines = [f"Recommended: {recommendation.primary.value.upper()}"]
    if recommendation.secondary is not None:
        lines.append(f"Alternative: {recommendation.secondary.value.upper()}")
    lines.append(f"Reason:      {recommendation.reason}")
    for fmt in OutputFormat:
        size = recommendation.estimated_sizes.get(fmt)
        if size is not None:
            lines.append(f"Est. {fmt.value.upper():<5}:  {size}")
    lines.extend(f"Warning:     {w}" for w in recommendation.warnings)
    return "\n".join(lines)


def estimate_to_dict(estimate: EstimateResult) -> dict[str, Any]:
    return {
        "estimated_size_mb": estimate.estimated_size,
        "estimated_time_seconds": estimate.estimated_time,
        "warnings": list(estimate.warnings),
    }


def settings_to_dict(settings: GifSettings | WebMSettings) -> dict[str, Any]:
    if isinstance(settings, GifSettings):
        return {
            "fps": settings.fps,
            "width": settings.width,
            "height": settings.height,
            "quality": settings.quality.value,
            "optimize": settings.optimize,
        }
    return {
        "crf": settings.crf,
        "codec": settings.codec.value,
        "bitrate": settings.bitrate,
        "fps": settings.fps,
        "width": settings.width,
        "height": settings.height,
    }


def preset_to_dict(preset: QualityPreset) -> dict[str, Any]:
    return {
        "name": preset.name,
        "label": preset.label,
        "description": preset.description,
        "gif": settings_to_dict(preset.gif_settings),
        "webm": settings_to_dict(preset.webm_settings),
        "estimated_size_multiplier": preset.estimated_size_multiplier,
        "conversion_time": preset.conversion_time.value,
    }


def _describe_size(width: int | None, height: int | None) -> str:
    if width is None and height is None:
        return "source size"
    return f"{width or 'auto'}x{height or 'auto'}"


def format_preset_human(preset: QualityPreset) -> str:
    gif = preset.gif_settings
    webm = preset.webm_settings
    gif_fps = f"{gif.fps} fps" if gif.fps else "source fps"
    webm_fps = f"{webm.fps} fps" if webm.fps else "source fps"
    gif_line = (
        f"  GIF:  {gif_fps}, {_describe_size(gif.width, gif.height)}, "
        f"{gif.quality.value} quality"
    )
    if gif.optimize:
        gif_line += ", palette optimized"

    lines = [f"{preset.name} - {preset.label} ({preset.conversion_time.value})"]
    if preset.description:
        lines.append(f"  {preset.description}")
    lines.append(gif_line)
    lines.append(
        f"  WebM: {webm.codec.value} crf {webm.crf}, {webm_fps}, "
        f"{_describe_size(webm.width, webm.height)}"
    )
    return "\n".join(lines)


def job_to_dict(job: ConversionJobState) -> dict[str, Any]:
    return {
        "format": job.format.value,
        "status": job.status.value,
        "progress": job.progress,
        "message": job.message,
        "estimated_time": job.estimated_time,
        "timeout_seconds": job.timeout_seconds,
    }


def results_to_dict(
    results: ConversionResults,
    jobs: dict[OutputFormat, ConversionJobState],
    written: dict[OutputFormat, str],
) -> dict[str, Any]:
    return {
        "original_size": results.metadata.original_size,
        "outputs": {
            fmt.value: {
                "path": written.get(fmt),
                "size": results.metadata.sizes[fmt],
                "compression_ratio": results.metadata.compression_ratios[fmt],
            }
            for fmt in OutputFormat
        },
        "jobs": [job_to_dict(job) for job in jobs.values()],
    }
