"""Tests for the format recommendation engine."""

from __future__ import annotations

import dataclasses

import pytest

from flexigif.config.models import MIB
from flexigif.domain.enums import OutputFormat, Purpose
from flexigif.domain.models import Platform, UserIntent, VideoMetadata
from flexigif.estimation.model import EstimationModel
from flexigif.messages import get_message
from flexigif.recommendation import RecommendationEngine
from flexigif.recommendation.platforms import (
    DISCORD_MAX_FILE_SIZE,
    PLATFORM_LIMITS,
    platform_from_name,
)

DISCORD = PLATFORM_LIMITS["discord"]


@pytest.fixture
def engine() -> RecommendationEngine:
    return RecommendationEngine()


class TestPurpose:
    """Tests for the purpose-to-format mapping."""

    def test_social(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should prefer GIF for social media."""
        result = engine.analyze(UserIntent(purpose=Purpose.SOCIAL), metadata)
        assert result.formats == (OutputFormat.GIF, OutputFormat.WEBM)
        assert result.reason == get_message("recommend.reason.social")
        assert result.warnings == ()

    def test_website(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should prefer WebM for websites."""
        result = engine.analyze(UserIntent(purpose=Purpose.WEBSITE), metadata)
        assert result.formats == (OutputFormat.WEBM, OutputFormat.GIF)
        assert result.reason == get_message("recommend.reason.website")

    @pytest.mark.parametrize("purpose", [Purpose.BOTH, Purpose.UNKNOWN])
    def test_other_purposes(
        self,
        engine: RecommendationEngine,
        metadata: VideoMetadata,
        purpose: Purpose,
    ) -> None:
        """Should recommend both formats without warnings."""
        long_video = dataclasses.replace(metadata, duration=90.0)
        intent = UserIntent(purpose=purpose, platforms=(DISCORD,))
        result = engine.analyze(intent, long_video)
        assert result.formats == (OutputFormat.GIF, OutputFormat.WEBM)
        assert result.reason == get_message("recommend.reason.both")
        assert result.warnings == ()

    def test_purpose_parsing(self) -> None:
        """Should map unrecognized purposes to unknown."""
        assert Purpose.parse(" Website ") is Purpose.WEBSITE
        assert Purpose.parse("print") is Purpose.UNKNOWN
        assert Purpose.parse(None) is Purpose.UNKNOWN

    def test_estimated_sizes_attached(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should include a size estimate for every format."""
        result = engine.analyze(UserIntent(purpose=Purpose.SOCIAL), metadata)
        assert result.estimated_sizes == {
            OutputFormat.GIF: "50.6 MB",
            OutputFormat.WEBM: "1.3 MB",
        }


class TestWebsiteWarnings:
    """Tests for website advisories."""

    def test_all_warnings_in_order(self, engine: RecommendationEngine) -> None:
        """Should warn about duration, resolution and size."""
        metadata = VideoMetadata(
            duration=75.0,
            width=3840,
            height=2160,
            fps=30,
            size=80 * MIB,
            codec="h264",
        )
        result = engine.analyze(UserIntent(purpose=Purpose.WEBSITE), metadata)
        assert result.warnings == (
            get_message("warning.long_video_10s"),
            get_message("warning.long_video_60s"),
            get_message("warning.high_resolution"),
            get_message("warning.large_original", size="80.0 MB"),
        )

    def test_boundaries_are_exclusive(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should not warn at exactly 10 seconds or Full HD."""
        at_limits = dataclasses.replace(
            metadata, duration=10.0, width=1920, height=1080, size=50 * MIB
        )
        result = engine.analyze(UserIntent(purpose=Purpose.WEBSITE), at_limits)
        assert result.warnings == ()

    def test_platform_warnings_follow(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should append platform warnings after website warnings."""
        long_video = dataclasses.replace(metadata, duration=20.0)
        intent = UserIntent(purpose=Purpose.WEBSITE, platforms=(DISCORD,))
        result = engine.analyze(intent, long_video)
        assert result.warnings[0] == get_message("warning.long_video_10s")
        assert result.warnings[1] == get_message("warning.discord_prefers_webm")


class TestDiscordWarnings:
    """Tests for Discord advisories."""

    def test_discord(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should suggest WebM and mention the 25 MB cap."""
        intent = UserIntent(purpose=Purpose.SOCIAL, platforms=(DISCORD,))
        result = engine.analyze(intent, metadata)
        assert result.warnings == (
            get_message("warning.discord_prefers_webm"),
            get_message("warning.discord_size_limit", limit="25.0 MB"),
        )

    def test_discord_with_larger_limit(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should skip the size warning above the default cap."""
        nitro = Platform(name="Discord Nitro", max_file_size=100 * MIB)
        intent = UserIntent(purpose=Purpose.SOCIAL, platforms=(nitro,))
        result = engine.analyze(intent, metadata)
        assert result.warnings == (get_message("warning.discord_prefers_webm"),)

    def test_other_platforms_silent(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should not warn for non-Discord platforms."""
        intent = UserIntent(
            purpose=Purpose.SOCIAL,
            platforms=(PLATFORM_LIMITS["twitter"], platform_from_name("mastodon")),
        )
        assert engine.analyze(intent, metadata).warnings == ()

    def test_localized(self, metadata: VideoMetadata) -> None:
        """Should localize reasons and warnings."""
        engine = RecommendationEngine(locale="ko")
        intent = UserIntent(purpose=Purpose.SOCIAL, platforms=(DISCORD,))
        result = engine.analyze(intent, metadata)
        assert result.reason == get_message("recommend.reason.social", "ko")
        assert result.warnings[0] == get_message("warning.discord_prefers_webm", "ko")


class TestDeterminism:
    """Tests for purity of analyze()."""

    def test_same_input_same_output(self, metadata: VideoMetadata) -> None:
        """Should return equal results for equal inputs."""
        intent = UserIntent(purpose=Purpose.WEBSITE, platforms=(DISCORD,))
        first = RecommendationEngine().analyze(intent, metadata)
        second = RecommendationEngine().analyze(intent, metadata)
        assert first == second

    def test_shared_estimator_uses_cache(self, metadata: VideoMetadata) -> None:
        """Should reuse cached size estimates across calls."""
        estimator = EstimationModel()
        engine = RecommendationEngine(estimator)
        intent = UserIntent(purpose=Purpose.SOCIAL)
        engine.analyze(intent, metadata)
        engine.analyze(intent, metadata)
        assert estimator.cache.hits == 2


class TestPlatforms:
    """Tests for platform lookup."""

    def test_known(self) -> None:
        """Should find known platforms case-insensitively."""
        assert platform_from_name(" Discord ").max_file_size == DISCORD_MAX_FILE_SIZE

    def test_unknown(self) -> None:
        """Should return an unlimited platform for unknown names."""
        platform = platform_from_name("Mastodon")
        assert platform.name == "Mastodon"
        assert platform.max_file_size == 0

    def test_unknown_discord_variant_uses_default_cap(
        self, engine: RecommendationEngine, metadata: VideoMetadata
    ) -> None:
        """Should fall back to the 25 MB cap when no limit is known."""
        intent = UserIntent(
            purpose=Purpose.SOCIAL, platforms=(platform_from_name("discord-beta"),)
        )
        result = engine.analyze(intent, metadata)
        assert result.warnings[-1] == get_message(
            "warning.discord_size_limit", limit="25.0 MB"
        )
