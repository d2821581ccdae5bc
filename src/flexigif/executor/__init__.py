"""Conversion engines, ffmpeg command builders and the ffmpeg backend."""

from flexigif.executor.base import BaseEngine, ConversionPlan
from flexigif.executor.commands import build_gif_commands, build_webm_command
from flexigif.executor.factory import close_engines, create_engines
from flexigif.executor.ffmpeg_backend import FFmpegBackend
from flexigif.executor.ffmpeg_progress import (
    ProgressTracker,
    parse_duration,
    parse_time,
)
from flexigif.executor.gif import GifEngine
from flexigif.executor.interface import (
    ConversionEngine,
    EngineSet,
    TranscodeBackend,
)
from flexigif.executor.webm import WebMEngine

__all__ = [
    "BaseEngine",
    "ConversionEngine",
    "ConversionPlan",
    "EngineSet",
    "FFmpegBackend",
    "GifEngine",
    "ProgressTracker",
    "TranscodeBackend",
    "WebMEngine",
    "build_gif_commands",
    "build_webm_command",
    "close_engines",
    "create_engines",
    "parse_duration",
    "parse_time",
]
