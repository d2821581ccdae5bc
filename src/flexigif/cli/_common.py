"""Helpers shared by CLI commands."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from flexigif.cli.exit_codes import ExitCode
from flexigif.config.models import FlexiGifConfig
from flexigif.domain.models import VideoFile, VideoMetadata
from flexigif.exceptions import (
    AnalysisTimeout,
    ConversionTimeout,
    DecodeFailed,
    EnvironmentUnsupported,
    ExecutionFailed,
    FlexiGifError,
    InitializationFailed,
    LoadError,
    ValidationError,
    user_message,
)
from flexigif.executor.factory import create_engines
from flexigif.executor.interface import EngineSet
from flexigif.introspector.analyzer import MetadataAnalyzer
from flexigif.introspector.ffprobe import FFprobeProbe
from flexigif.introspector.validation import validate_file

logger = logging.getLogger(__name__)

_EXIT_CODES: tuple[tuple[type[FlexiGifError], ExitCode], ...] = (
    (ValidationError, ExitCode.VALIDATION_ERROR),
    (AnalysisTimeout, ExitCode.ANALYSIS_ERROR),
    (LoadError, ExitCode.ANALYSIS_ERROR),
    (EnvironmentUnsupported, ExitCode.TOOL_NOT_FOUND),
    (InitializationFailed, ExitCode.CONVERSION_FAILED),
    (ExecutionFailed, ExitCode.CONVERSION_FAILED),
    (DecodeFailed, ExitCode.CONVERSION_FAILED),
    (ConversionTimeout, ExitCode.CONVERSION_FAILED),
)


def exit_code_for(exc: FlexiGifError) -> ExitCode:
    """Map a FlexiGif error to the CLI exit code for its kind."""
    for error_type, code in _EXIT_CODES:
        if isinstance(exc, error_type):
            return code
    return ExitCode.GENERAL_ERROR


def fail(exc: FlexiGifError, config: FlexiGifConfig) -> NoReturn:
    """Print the localized message for exc and exit with its code."""
    logger.debug("Command failed: %s", exc, exc_info=True)
    click.echo(f"Error: {user_message(exc, config.locale)}", err=True)
    sys.exit(exit_code_for(exc))


def get_config(ctx: click.Context) -> FlexiGifConfig:
    return ctx.obj["config"]


def load_video(path_arg: str, config: FlexiGifConfig) -> VideoFile:
    """Open and validate an input file, exiting on failure."""
    path = Path(path_arg)
    if not path.is_file():
        click.echo(f"Error: File not found: {path}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    video = VideoFile.from_path(path)
    try:
        validate_file(video, config.limits)
    except ValidationError as e:
        fail(e, config)
    return video


def get_analyzer(ctx: click.Context) -> MetadataAnalyzer:
    """Return the analyzer for this invocation, creating it on first use."""
    analyzer = ctx.obj.get("analyzer")
    if analyzer is None:
        config = get_config(ctx)
        probe = ctx.obj.get("probe")
        if probe is None:
            try:
                probe = FFprobeProbe(config.tools.ffprobe)
            except EnvironmentUnsupported as e:
                fail(e, config)
        analyzer = MetadataAnalyzer(probe, config.limits, config.locale)
        ctx.obj["analyzer"] = analyzer
    return analyzer


def get_engines(ctx: click.Context) -> EngineSet:
    """Return the engines for this invocation, creating them on first use."""
    engines = ctx.obj.get("engines")
    if engines is None:
        engines = create_engines(get_config(ctx), get_analyzer(ctx))
        ctx.obj["engines"] = engines
    return engines


def analyze_video(ctx: click.Context, video: VideoFile) -> VideoMetadata:
    """Analyze video, exiting with a localized error on failure."""
    try:
        return get_analyzer(ctx).analyze(video)
    except FlexiGifError as e:
        fail(e, get_config(ctx))


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


output_format_option = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
