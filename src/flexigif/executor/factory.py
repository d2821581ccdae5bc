"""Build the default ffmpeg-backed engines from configuration."""

from __future__ import annotations

from flexigif.config.models import FlexiGifConfig
from flexigif.executor.ffmpeg_backend import FFmpegBackend
from flexigif.executor.gif import GifEngine
from flexigif.executor.interface import EngineSet
from flexigif.executor.webm import WebMEngine
from flexigif.introspector.analyzer import MetadataAnalyzer


def create_engines(
    config: FlexiGifConfig,
    analyzer: MetadataAnalyzer | None = None,
) -> EngineSet:
    """Create one GIF and one WebM engine, each with its own backend.

    Backends are not loaded here; engines load them on first use.
    """
    return EngineSet(
        gif=GifEngine(
            FFmpegBackend(config.tools.ffmpeg),
            analyzer=analyzer,
            locale=config.locale,
        ),
        webm=WebMEngine(FFmpegBackend(config.tools.ffmpeg), locale=config.locale),
    )


def close_engines(engines: EngineSet) -> None:
    """Release backend workspaces held by engines."""
    for engine in (engines.gif, engines.webm):
        close = getattr(engine.backend, "close", None)
        if close is not None:
            close()
