"""Tests for MetadataAnalyzer."""

from __future__ import annotations

from pathlib import Path

import pytest

from flexigif.config.models import LimitsConfig
from flexigif.domain.models import VideoFile, VideoMetadata
from flexigif.exceptions import (
    AnalysisTimeout,
    DurationExceeded,
    DurationTooShort,
    LoadError,
)
from flexigif.introspector.analyzer import (
    MetadataAnalyzer,
    infer_codec,
    infer_frame_rate,
)
from flexigif.introspector.interface import ContainerInfo
from flexigif.messages import get_message


def _meta(**kwargs) -> VideoMetadata:
    values = dict(
        duration=8.0, width=1280, height=720, fps=30, size=1024, codec="h264"
    )
    values.update(kwargs)
    return VideoMetadata(**values)


class TestInference:
    """Tests for extension-based inference."""

    @pytest.mark.parametrize(
        ("ext", "fps"), [("avi", 25), ("AVI", 25), ("mp4", 30), ("mov", 30)]
    )
    def test_frame_rate(self, ext: str, fps: int) -> None:
        """Should assume 25 fps for avi and 30 otherwise."""
        assert infer_frame_rate(ext) == fps

    @pytest.mark.parametrize(
        ("ext", "codec"),
        [("mp4", "h264"), ("mov", "h264"), ("avi", "mpeg4"), ("flv", "unknown")],
    )
    def test_codec(self, ext: str, codec: str) -> None:
        """Should map known extensions and fall back to unknown."""
        assert infer_codec(ext) == codec


class TestAnalyze:
    """Tests for MetadataAnalyzer.analyze."""

    def test_memory_backed_file(self, make_probe, video_file: VideoFile) -> None:
        """Should probe a temp copy and remove it afterwards."""
        probe = make_probe()
        metadata = MetadataAnalyzer(probe).analyze(video_file)

        assert metadata == VideoMetadata(
            duration=8.0,
            width=1280,
            height=720,
            fps=30,
            size=video_file.size,
            codec="h264",
        )
        assert probe.existed == [True]
        assert probe.probed[0].suffix == ".mp4"
        assert not probe.probed[0].exists()

    def test_path_backed_file(self, make_probe, video_on_disk: Path) -> None:
        """Should probe the file in place."""
        probe = make_probe()
        MetadataAnalyzer(probe).analyze(VideoFile.from_path(video_on_disk))
        assert probe.probed == [video_on_disk]
        assert video_on_disk.exists()

    def test_temp_file_removed_on_error(
        self, make_probe, video_file: VideoFile
    ) -> None:
        """Should clean up the temp copy when probing fails."""
        probe = make_probe(error=LoadError("broken"))
        with pytest.raises(LoadError):
            MetadataAnalyzer(probe).analyze(video_file)
        assert not probe.probed[0].exists()

    def test_avi_inference(self, make_probe) -> None:
        """Should infer avi frame rate and codec."""
        file = VideoFile.from_bytes("old.avi", b"\x00" * 2048, "video/x-msvideo")
        metadata = MetadataAnalyzer(make_probe()).analyze(file)
        assert metadata.fps == 25
        assert metadata.codec == "mpeg4"

    def test_too_long(self, make_probe, video_file: VideoFile) -> None:
        """Should reject videos over the maximum duration."""
        probe = make_probe(ContainerInfo(duration=301.0, width=640, height=480))
        with pytest.raises(DurationExceeded):
            MetadataAnalyzer(probe).analyze(video_file)

    def test_passes_analysis_timeout(self, video_file: VideoFile) -> None:
        """Should bound the probe by the configured timeout."""
        seen: list[float] = []

        class RecordingProbe:
            def probe(self, path: Path, timeout: float) -> ContainerInfo:
                seen.append(timeout)
                return ContainerInfo(duration=2.0, width=640, height=480)

        limits = LimitsConfig(analysis_timeout=3.0)
        MetadataAnalyzer(RecordingProbe(), limits).analyze(video_file)
        assert seen == [3.0]


class TestAnalyzeOrNone:
    """Tests for MetadataAnalyzer.analyze_or_none."""

    @pytest.mark.parametrize(
        "error", [AnalysisTimeout("clip.mp4", 10.0), LoadError("bad")]
    )
    def test_absorbs_analysis_failures(
        self, make_probe, video_file: VideoFile, error: Exception
    ) -> None:
        """Should return None when metadata cannot be obtained."""
        analyzer = MetadataAnalyzer(make_probe(error=error))
        assert analyzer.analyze_or_none(video_file) is None

    def test_validation_errors_propagate(
        self, make_probe, video_file: VideoFile
    ) -> None:
        """Should still raise duration errors."""
        probe = make_probe(ContainerInfo(duration=0.05, width=640, height=480))
        with pytest.raises(DurationTooShort):
            MetadataAnalyzer(probe).analyze_or_none(video_file)


class TestValidateMetadata:
    """Tests for MetadataAnalyzer.validate_metadata."""

    @pytest.fixture
    def analyzer(self, make_probe) -> MetadataAnalyzer:
        return MetadataAnalyzer(make_probe())

    def test_no_warnings(self, analyzer: MetadataAnalyzer) -> None:
        """Should attach nothing to an ordinary clip."""
        assert analyzer.validate_metadata(_meta()).warnings == ()

    def test_bounds_are_inclusive(self, analyzer: MetadataAnalyzer) -> None:
        """Should accept durations exactly at the limits."""
        analyzer.validate_metadata(_meta(duration=0.1))
        analyzer.validate_metadata(_meta(duration=300.0))

    def test_too_short(self, analyzer: MetadataAnalyzer) -> None:
        """Should reject durations under the minimum."""
        with pytest.raises(DurationTooShort):
            analyzer.validate_metadata(_meta(duration=0.09))

    def test_too_long(self, analyzer: MetadataAnalyzer) -> None:
        """Should reject durations over the maximum."""
        with pytest.raises(DurationExceeded) as exc_info:
            analyzer.validate_metadata(_meta(duration=300.5))
        assert exc_info.value.max_duration == 300.0

    def test_invalid_frame_size(self, analyzer: MetadataAnalyzer) -> None:
        """Should reject non-positive dimensions."""
        with pytest.raises(LoadError):
            analyzer.validate_metadata(_meta(width=0))

    def test_advisory_warnings(self, analyzer: MetadataAnalyzer) -> None:
        """Should warn about high resolution and long duration."""
        result = analyzer.validate_metadata(
            _meta(width=3840, height=2160, duration=90.0)
        )
        assert result.warnings == (
            get_message("metadata.high_resolution"),
            get_message("metadata.long_duration"),
        )

    def test_low_resolution_warning(self, analyzer: MetadataAnalyzer) -> None:
        """Should warn when either dimension is small."""
        result = analyzer.validate_metadata(_meta(width=300, height=480))
        assert result.warnings == (get_message("metadata.low_resolution"),)

    def test_localized_warnings(self, make_probe) -> None:
        """Should use the analyzer locale."""
        analyzer = MetadataAnalyzer(make_probe(), locale="ko")
        result = analyzer.validate_metadata(_meta(duration=61.0))
        assert result.warnings == (get_message("metadata.long_duration", "ko"),)
