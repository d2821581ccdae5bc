"""FFmpeg argument builders.

Pure functions that turn settings into ffmpeg argument vectors. The
vectors exclude the executable and global flags, which the backend
prepends. Every filter chain is a single argument.
"""

from __future__ import annotations

from flexigif.domain.enums import QualityLevel, WebMCodec
from flexigif.domain.models import GifSettings, WebMSettings

# Palette size per GIF quality level
PALETTE_COLORS: dict[QualityLevel, int] = {
    QualityLevel.LOW: 128,
    QualityLevel.MEDIUM: 256,
    QualityLevel.HIGH: 256,
}

# VP8 constrained quality needs a bitrate ceiling
VP8_DEFAULT_MAX_BITRATE = "1M"


def _scale_fragment(
    width: int | None, height: int | None, keep_aspect: str
) -> str | None:
    """Build ``W:H`` for a scale filter, or None when neither is set.

    A missing dimension becomes keep_aspect (-1, or -2 to force an even
    size) so ffmpeg derives it from the aspect ratio.
    """
    if width is None and height is None:
        return None
    w = str(width) if width is not None else keep_aspect
    h = str(height) if height is not None else keep_aspect
    return f"{w}:{h}"


def gif_filter_chain(settings: GifSettings) -> str:
    """Comma-joined fps and scale filters for a GIF, possibly empty."""
    filters: list[str] = []
    if settings.fps is not None:
        filters.append(f"fps={settings.fps}")
    scale = _scale_fragment(settings.width, settings.height, "-1")
    if scale is not None:
        filters.append(f"scale={scale}:flags=lanczos")
    return ",".join(filters)


def build_gif_commands(
    input_name: str,
    output_name: str,
    settings: GifSettings,
    palette_name: str | None = None,
) -> list[list[str]]:
    """Build the ffmpeg invocations for a GIF conversion.

    With settings.optimize the conversion is two passes: generate a
    palette image, then map the frames onto it. Otherwise one pass.

    Raises:
        ValueError: If optimize is set and palette_name is not given.
    """
    chain = gif_filter_chain(settings)

    if not settings.optimize:
        cmd = ["-i", input_name]
        if chain:
            cmd += ["-vf", chain]
        cmd.append(output_name)
        return [cmd]

    if palette_name is None:
        raise ValueError("palette_name is required for two-pass GIF conversion")

    colors = PALETTE_COLORS[settings.quality]
    palettegen = f"palettegen=max_colors={colors}"
    pass1 = [
        "-i",
        input_name,
        "-vf",
        f"{chain},{palettegen}" if chain else palettegen,
        palette_name,
    ]

    if chain:
        graph = f"{chain}[x];[x][1:v]paletteuse"
    else:
        graph = "[0:v][1:v]paletteuse"
    pass2 = [
        "-i",
        input_name,
        "-i",
        palette_name,
        "-filter_complex",
        graph,
        output_name,
    ]
    return [pass1, pass2]


def _effort_args(crf: int) -> list[str]:
    """Encoder speed/effort flags; lower CRF gets a slower, better encode."""
    if crf <= 15:
        return ["-deadline", "best", "-cpu-used", "0", "-threads", "8"]
    if crf <= 25:
        return ["-deadline", "good", "-cpu-used", "2", "-threads", "4"]
    return ["-deadline", "realtime", "-cpu-used", "5", "-threads", "2"]


def build_webm_command(
    input_name: str,
    output_name: str,
    settings: WebMSettings,
) -> list[str]:
    """Build the single ffmpeg invocation for a silent WebM conversion."""
    cmd = ["-i", input_name]

    if settings.codec is WebMCodec.VP9:
        cmd += ["-c:v", "libvpx-vp9", "-crf", str(settings.crf), "-b:v", "0"]
    else:
        cmd += ["-c:v", "libvpx"]
        if settings.bitrate:
            cmd += ["-b:v", settings.bitrate]
        else:
            cmd += ["-crf", str(settings.crf), "-b:v", VP8_DEFAULT_MAX_BITRATE]

    cmd.append("-an")
    cmd += _effort_args(settings.crf)

    filters: list[str] = []
    scale = _scale_fragment(settings.width, settings.height, "-2")
    if scale is not None:
        filters.append(f"scale={scale}")
    if settings.fps is not None:
        filters.append(f"fps={settings.fps}")
    if filters:
        cmd += ["-vf", ",".join(filters)]

    cmd.append(output_name)
    return cmd
