"""Tests for ffmpeg argument builders."""

from __future__ import annotations

import pytest

from flexigif.domain.enums import QualityLevel, WebMCodec
from flexigif.domain.models import GifSettings, WebMSettings
from flexigif.executor.commands import (
    build_gif_commands,
    build_webm_command,
    gif_filter_chain,
)


class TestGifFilterChain:
    """Tests for gif_filter_chain."""

    def test_fps_and_size(self) -> None:
        """Should join fps and lanczos scale filters."""
        settings = GifSettings(fps=15, width=540, height=405)
        assert gif_filter_chain(settings) == "fps=15,scale=540:405:flags=lanczos"

    def test_width_only_keeps_aspect(self) -> None:
        """Should use -1 for the missing dimension."""
        assert gif_filter_chain(GifSettings(fps=None, width=400)) == (
            "scale=400:-1:flags=lanczos"
        )

    def test_empty(self) -> None:
        """Should return an empty chain when nothing is set."""
        assert gif_filter_chain(GifSettings(fps=None)) == ""


class TestBuildGifCommands:
    """Tests for build_gif_commands."""

    def test_two_pass_palette(self) -> None:
        """Should generate then apply a palette when optimizing."""
        settings = GifSettings(fps=15, width=540, height=405)
        pass1, pass2 = build_gif_commands(
            "in.mp4", "out.gif", settings, palette_name="pal.png"
        )
        assert pass1 == [
            "-i",
            "in.mp4",
            "-vf",
            "fps=15,scale=540:405:flags=lanczos,palettegen=max_colors=256",
            "pal.png",
        ]
        assert pass2 == [
            "-i",
            "in.mp4",
            "-i",
            "pal.png",
            "-filter_complex",
            "fps=15,scale=540:405:flags=lanczos[x];[x][1:v]paletteuse",
            "out.gif",
        ]

    def test_low_quality_palette(self) -> None:
        """Should use 128 colours for low quality."""
        settings = GifSettings(fps=None, quality=QualityLevel.LOW)
        pass1, pass2 = build_gif_commands("in.mp4", "out.gif", settings, "p.png")
        assert pass1[3] == "palettegen=max_colors=128"
        assert pass2[5] == "[0:v][1:v]paletteuse"

    def test_single_pass(self) -> None:
        """Should run one pass without a palette when not optimizing."""
        settings = GifSettings(fps=10, optimize=False)
        assert build_gif_commands("in.mp4", "out.gif", settings) == [
            ["-i", "in.mp4", "-vf", "fps=10", "out.gif"]
        ]

    def test_single_pass_without_filters(self) -> None:
        """Should omit -vf when there is nothing to filter."""
        settings = GifSettings(fps=None, optimize=False)
        assert build_gif_commands("in.mp4", "out.gif", settings) == [
            ["-i", "in.mp4", "out.gif"]
        ]

    def test_palette_name_required(self) -> None:
        """Should refuse a two-pass build without a palette name."""
        with pytest.raises(ValueError):
            build_gif_commands("in.mp4", "out.gif", GifSettings())


class TestBuildWebmCommand:
    """Tests for build_webm_command."""

    def test_vp8_defaults(self) -> None:
        """Should cap VP8 at 1M and drop audio."""
        cmd = build_webm_command("in.mp4", "out.webm", WebMSettings())
        assert cmd == [
            "-i",
            "in.mp4",
            "-c:v",
            "libvpx",
            "-crf",
            "25",
            "-b:v",
            "1M",
            "-an",
            "-deadline",
            "good",
            "-cpu-used",
            "2",
            "-threads",
            "4",
            "out.webm",
        ]

    def test_vp8_explicit_bitrate(self) -> None:
        """Should use the explicit bitrate instead of CRF."""
        cmd = build_webm_command("in.mp4", "out.webm", WebMSettings(bitrate="800k"))
        assert cmd[2:6] == ["-c:v", "libvpx", "-b:v", "800k"]
        assert "-crf" not in cmd

    def test_vp9_constant_quality(self) -> None:
        """Should use CRF with zero bitrate for VP9."""
        cmd = build_webm_command(
            "in.mp4", "out.webm", WebMSettings(crf=15, codec=WebMCodec.VP9)
        )
        assert cmd[2:8] == ["-c:v", "libvpx-vp9", "-crf", "15", "-b:v", "0"]
        assert cmd[cmd.index("-deadline") + 1] == "best"

    @pytest.mark.parametrize(
        ("crf", "deadline", "cpu_used"),
        [
            (15, "best", "0"),
            (16, "good", "2"),
            (25, "good", "2"),
            (26, "realtime", "5"),
        ],
    )
    def test_effort_tiers(self, crf: int, deadline: str, cpu_used: str) -> None:
        """Should trade speed for quality by CRF."""
        cmd = build_webm_command("in.mp4", "out.webm", WebMSettings(crf=crf))
        assert cmd[cmd.index("-deadline") + 1] == deadline
        assert cmd[cmd.index("-cpu-used") + 1] == cpu_used

    def test_scale_and_fps(self) -> None:
        """Should scale with even sizes before changing frame rate."""
        cmd = build_webm_command(
            "in.mp4", "out.webm", WebMSettings(width=640, fps=24)
        )
        assert cmd[-3:] == ["-vf", "scale=640:-2,fps=24", "out.webm"]
