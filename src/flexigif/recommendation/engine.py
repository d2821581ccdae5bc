"""Purpose-driven output format recommendation."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flexigif.config.models import MIB
from flexigif.core.formatting import format_file_size
from flexigif.domain.enums import OutputFormat, Purpose
from flexigif.domain.models import (
    FULL_HD_PIXELS,
    FormatRecommendation,
    Platform,
    UserIntent,
    VideoMetadata,
)
from flexigif.estimation.model import EstimationModel
from flexigif.messages import get_message
from flexigif.recommendation.platforms import DISCORD_MAX_FILE_SIZE

logger = logging.getLogger(__name__)

LARGE_ORIGINAL_BYTES = 50 * MIB


class RecommendationEngine:
    """Recommend output formats for a user intent and video.

    The result is a pure function of the intent and metadata.

    Args:
        estimator: Source of the size estimates attached to each result.
        locale: Locale for reasons and warnings.
    """

    def __init__(
        self,
        estimator: EstimationModel | None = None,
        locale: str | None = None,
    ) -> None:
        self.estimator = estimator or EstimationModel()
        self.locale = locale

    def analyze(
        self, intent: UserIntent, metadata: VideoMetadata
    ) -> FormatRecommendation:
        estimated_sizes = self.estimator.estimate_sizes(metadata)

        if intent.purpose is Purpose.SOCIAL:
            recommendation = FormatRecommendation(
                primary=OutputFormat.GIF,
                secondary=OutputFormat.WEBM,
                reason=self._msg("recommend.reason.social"),
                warnings=tuple(self._platform_warnings(intent.platforms)),
                estimated_sizes=estimated_sizes,
            )
        elif intent.purpose is Purpose.WEBSITE:
            warnings = self._website_warnings(metadata)
            warnings.extend(self._platform_warnings(intent.platforms))
            recommendation = FormatRecommendation(
                primary=OutputFormat.WEBM,
                secondary=OutputFormat.GIF,
                reason=self._msg("recommend.reason.website"),
                warnings=tuple(warnings),
                estimated_sizes=estimated_sizes,
            )
        else:
            recommendation = FormatRecommendation(
                primary=OutputFormat.GIF,
                secondary=OutputFormat.WEBM,
                reason=self._msg("recommend.reason.both"),
                estimated_sizes=estimated_sizes,
            )

        logger.debug(
            "Recommended %s for purpose %s (%d warnings)",
            recommendation.primary.value,
            intent.purpose.value,
            len(recommendation.warnings),
        )
        return recommendation

    def _website_warnings(self, metadata: VideoMetadata) -> list[str]:
        warnings: list[str] = []
        if metadata.duration > 10:
            warnings.append(self._msg("warning.long_video_10s"))
        if metadata.duration > 60:
            warnings.append(self._msg("warning.long_video_60s"))
        if metadata.pixels > FULL_HD_PIXELS:
            warnings.append(self._msg("warning.high_resolution"))
        if metadata.size > LARGE_ORIGINAL_BYTES:
            size = format_file_size(metadata.size)
            warnings.append(self._msg("warning.large_original", size=size))
        return warnings

    def _platform_warnings(self, platforms: Iterable[Platform]) -> list[str]:
        discord = next(
            (p for p in platforms if "discord" in p.name.casefold()), None
        )
        if discord is None:
            return []
        warnings = [self._msg("warning.discord_prefers_webm")]
        if discord.max_file_size <= DISCORD_MAX_FILE_SIZE:
            # Unknown platforms carry no limit; assume the default cap
            limit = discord.max_file_size or DISCORD_MAX_FILE_SIZE
            warnings.append(
                self._msg("warning.discord_size_limit", limit=format_file_size(limit))
            )
        return warnings

    def _msg(self, key: str, **params: object) -> str:
        return get_message(key, self.locale, **params)
