"""User-facing message catalog.

Every string shown to an end user (error descriptions, recommendation
reasons, warnings, job status lines) comes from this catalog so each can be
localized. Internal log messages are not localized.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        # Errors
        "error.validation": "The video file is not valid",
        "error.duration_exceeded": "Videos longer than {max_duration:g} seconds are not supported",
        "error.duration_too_short": "The video is too short (minimum {min_duration:g} seconds)",
        "error.file_too_large": "The file exceeds {max_size}",
        "error.file_too_small": "The file is too small",
        "error.unsupported_format": "This file type is not supported",
        "error.environment_unsupported": "This environment cannot run the video converter",
        "error.initialization_failed": "The video converter failed to load, please try again",
        "error.execution_failed": "The conversion failed, please try again",
        "error.decode_failed": "The converted file could not be read",
        "error.conversion_timeout": "The conversion took too long and was stopped",
        "error.analysis_timeout": "Reading the video information took too long",
        "error.load_error": "The video could not be read",
        "error.cancelled": "The conversion was cancelled",
        "error.unknown": "An unknown error occurred",
        # Recommendation reasons
        "recommend.reason.social": "GIF is recommended for maximum compatibility on social media",
        "recommend.reason.website": "WebM is recommended for website optimization",
        "recommend.reason.both": "Creating both formats is recommended to cover every use",
        # Recommendation warnings
        "warning.discord_prefers_webm": "Discord shows WebM in better quality than GIF",
        "warning.discord_size_limit": "Discord limits uploads to {limit}, check the output size",
        "warning.long_video_10s": "Videos over 10 seconds may produce large files",
        "warning.long_video_60s": "Videos over 1 minute may take a long time to convert",
        "warning.high_resolution": "High resolution videos produce large files, consider downscaling",
        "warning.large_original": "The original file is large ({size}), conversion may be slow",
        # Metadata advisories
        "metadata.high_resolution": "Resolution above 1080p may slow down conversion",
        "metadata.low_resolution": "Very low resolution, the output may look blurry",
        "metadata.long_duration": "Long video, conversion may take several minutes",
        # Estimate warnings
        "estimate.gif_too_large": "The estimated GIF size exceeds 50MB",
        "estimate.webm_too_large": "The WebM file may exceed 100MB",
        # Job status lines
        "job.pending": "Waiting",
        "job.processing": "Converting to {format}",
        "job.completed": "{format} ready",
    },
    "ko": {
        "error.validation": "올바르지 않은 영상 파일입니다",
        "error.duration_exceeded": "{max_duration:g}초를 초과하는 영상은 지원하지 않습니다",
        "error.duration_too_short": "영상이 너무 짧습니다 (최소 {min_duration:g}초)",
        "error.file_too_large": "파일이 {max_size}를 초과합니다",
        "error.file_too_small": "파일이 너무 작습니다",
        "error.unsupported_format": "지원하지 않는 파일 형식입니다",
        "error.environment_unsupported": "이 환경에서는 변환기를 실행할 수 없습니다",
        "error.initialization_failed": "변환기를 불러오지 못했습니다. 다시 시도해주세요",
        "error.execution_failed": "변환에 실패했습니다. 다시 시도해주세요",
        "error.decode_failed": "변환된 파일을 읽을 수 없습니다",
        "error.conversion_timeout": "변환 시간이 초과되었습니다",
        "error.analysis_timeout": "영상 정보를 읽는 데 시간이 너무 오래 걸립니다",
        "error.load_error": "영상을 읽을 수 없습니다",
        "error.cancelled": "변환이 취소되었습니다",
        "error.unknown": "알 수 없는 오류가 발생했습니다",
        "recommend.reason.social": "SNS 최대 호환성을 위해 GIF를 추천합니다",
        "recommend.reason.website": "웹사이트 최적화를 위해 WebM을 추천합니다",
        "recommend.reason.both": "용도별 최적화를 위해 두 포맷 모두 생성을 추천합니다",
        "warning.discord_prefers_webm": "Discord에서는 WebM이 더 좋은 품질을 제공합니다",
        "warning.discord_size_limit": "Discord 업로드 제한은 {limit}입니다. 파일 크기를 확인하세요",
        "warning.long_video_10s": "10초 이상 영상은 파일이 클 수 있습니다",
        "warning.long_video_60s": "1분 이상 영상은 변환에 시간이 오래 걸릴 수 있습니다",
        "warning.high_resolution": "고해상도 영상은 파일이 큽니다. 해상도를 낮추는 것을 고려하세요",
        "warning.large_original": "원본 파일이 큽니다 ({size}). 변환이 느릴 수 있습니다",
        "metadata.high_resolution": "1080p를 초과하는 해상도는 변환 속도를 늦출 수 있습니다",
        "metadata.low_resolution": "해상도가 매우 낮아 결과물이 흐릿할 수 있습니다",
        "metadata.long_duration": "긴 영상은 변환에 몇 분이 걸릴 수 있습니다",
        "estimate.gif_too_large": "예상 파일 크기가 50MB를 초과합니다",
        "estimate.webm_too_large": "WebM 파일이 100MB를 초과할 수 있습니다",
        "job.pending": "대기 중",
        "job.processing": "{format} 변환 중...",
        "job.completed": "{format} 완료",
    },
}


def available_locales() -> list[str]:
    """Return the supported locale codes."""
    return sorted(MESSAGES)


def get_message(key: str, locale: str | None = None, **params: object) -> str:
    """Look up and format a user-facing message.

    Falls back to DEFAULT_LOCALE for unknown locales or keys missing from a
    locale catalog.

    Args:
        key: Catalog key (e.g. "error.conversion_timeout").
        locale: Locale code. None uses DEFAULT_LOCALE.
        **params: Format parameters for the message template.

    Returns:
        The formatted message.

    Raises:
        KeyError: If the key is not in the default catalog.
    """
    catalog = MESSAGES.get((locale or DEFAULT_LOCALE).casefold())
    if catalog is None:
        logger.debug("Unknown locale %r, using %s", locale, DEFAULT_LOCALE)
        catalog = MESSAGES[DEFAULT_LOCALE]
    template = catalog.get(key)
    if template is None:
        template = MESSAGES[DEFAULT_LOCALE][key]
    return template.format(**params) if params else template
