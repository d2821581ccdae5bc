"""Tests for per-engine output estimates."""

from __future__ import annotations

import pytest

from flexigif.config.models import MIB
from flexigif.domain.enums import WebMCodec
from flexigif.domain.models import GifSettings, VideoFile, VideoMetadata, WebMSettings
from flexigif.estimation.engine_estimates import (
    estimate_gif_output,
    estimate_webm_output,
    webm_compression_ratio,
)
from flexigif.messages import get_message


class TestGifOutputEstimate:
    """Tests for estimate_gif_output."""

    def test_uses_settings_dimensions(self, metadata: VideoMetadata) -> None:
        """Should size from the output dimensions and frame rate."""
        result = estimate_gif_output(
            metadata, GifSettings(fps=15, width=540, height=405)
        )
        # 540 * 405 * 8s * 15fps * 0.5 bytes
        assert result.estimated_size == pytest.approx(13_122_000 / MIB, abs=0.05)
        assert result.estimated_time == 16
        assert result.warnings == ()

    def test_defaults_to_source_size_and_30_fps(self, metadata: VideoMetadata) -> None:
        """Should fall back to metadata size and 30 fps."""
        result = estimate_gif_output(metadata, GifSettings(fps=None))
        expected = 1280 * 720 * 8 * 30 * 0.5 / MIB
        assert result.estimated_size == pytest.approx(expected, abs=0.05)

    def test_warns_above_50_mb(self) -> None:
        """Should add a single warning for large GIFs."""
        meta = VideoMetadata(
            duration=60.0, width=1920, height=1080, fps=30, size=MIB, codec="h264"
        )
        result = estimate_gif_output(meta, GifSettings(fps=None))
        assert result.warnings == (get_message("estimate.gif_too_large"),)

    def test_localized_warning(self) -> None:
        """Should localize the warning."""
        meta = VideoMetadata(
            duration=60.0, width=1920, height=1080, fps=30, size=MIB, codec="h264"
        )
        result = estimate_gif_output(meta, GifSettings(fps=None), locale="ko")
        assert result.warnings == (get_message("estimate.gif_too_large", "ko"),)


class TestWebMOutputEstimate:
    """Tests for estimate_webm_output."""

    @pytest.mark.parametrize(
        ("crf", "ratio"), [(10, 0.7), (25, 0.7), (26, 0.6), (35, 0.6), (36, 0.4)]
    )
    def test_compression_ratio_tiers(self, crf: int, ratio: float) -> None:
        """Should pick the ratio by CRF tier."""
        assert webm_compression_ratio(crf) == ratio

    def test_vp8(self, video_file: VideoFile) -> None:
        """Should estimate 1.5 s per input MB for VP8."""
        result = estimate_webm_output(video_file, WebMSettings(crf=25))
        assert result.estimated_size == pytest.approx(1.4)
        assert result.estimated_time == 3

    def test_vp9_is_slower(self, video_file: VideoFile) -> None:
        """Should estimate 2 s per input MB for VP9."""
        result = estimate_webm_output(
            video_file, WebMSettings(crf=40, codec=WebMCodec.VP9)
        )
        assert result.estimated_size == pytest.approx(0.8)
        assert result.estimated_time == 4

    def test_warns_above_100_mb(self) -> None:
        """Should add a single warning for large outputs."""
        big = VideoFile(name="big.mp4", size=200 * MIB, mime_type="video/mp4")
        result = estimate_webm_output(big, WebMSettings(crf=20))
        assert result.warnings == (get_message("estimate.webm_too_large"),)

    def test_warning_uses_unrounded_size(self) -> None:
        """Should warn when the size exceeds 100 MB before rounding."""
        size = int(100.04 * MIB / 0.7) + 1
        edge = VideoFile(name="edge.mp4", size=size, mime_type="video/mp4")
        result = estimate_webm_output(edge, WebMSettings(crf=20))
        assert result.estimated_size == 100.0
        assert result.warnings == (get_message("estimate.webm_too_large"),)

    def test_no_warning_at_100_mb(self) -> None:
        """Should not warn for an output of exactly 100 MB."""
        size = int(100 * MIB / 0.7)
        edge = VideoFile(name="edge.mp4", size=size, mime_type="video/mp4")
        result = estimate_webm_output(edge, WebMSettings(crf=20))
        assert result.warnings == ()
