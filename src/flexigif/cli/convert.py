"""CLI convert command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from flexigif.cli._common import (
    echo_json,
    fail,
    get_analyzer,
    get_config,
    get_engines,
    load_video,
    output_format_option,
)
from flexigif.cli.exit_codes import ExitCode
from flexigif.cli.output import results_to_dict
from flexigif.config.presets import get_quality_preset
from flexigif.core.formatting import format_file_size
from flexigif.domain.enums import FORMAT_ORDER, JobStatus, OutputFormat, Purpose
from flexigif.domain.models import UserIntent, VideoMetadata
from flexigif.estimation.model import EstimationModel
from flexigif.exceptions import ValidationError
from flexigif.executor.factory import close_engines
from flexigif.jobs import ConversionSession, StderrProgressReporter
from flexigif.recommendation import RecommendationEngine

logger = logging.getLogger(__name__)


def _parse_formats(value: str) -> tuple[OutputFormat, ...]:
    formats: list[OutputFormat] = []
    for part in value.split(","):
        name = part.strip().casefold()
        if not name:
            continue
        try:
            formats.append(OutputFormat(name))
        except ValueError:
            raise click.BadParameter(
                f"unknown format {part.strip()!r}, expected gif or webm",
                param_hint="--formats",
            ) from None
    if not formats:
        raise click.BadParameter("no formats given", param_hint="--formats")
    return tuple(formats)


def _choose_formats(
    formats: str | None,
    purpose: str | None,
    metadata: VideoMetadata | None,
    engine: RecommendationEngine,
) -> tuple[OutputFormat, ...]:
    """Explicit --formats win; otherwise follow the purpose recommendation."""
    if formats:
        return _parse_formats(formats)
    if purpose is None or metadata is None:
        return FORMAT_ORDER
    recommendation = engine.analyze(UserIntent(Purpose.parse(purpose)), metadata)
    for warning in recommendation.warnings:
        click.echo(f"Warning: {warning}", err=True)
    return recommendation.formats


@click.command("convert")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--formats",
    default=None,
    help="Comma-separated output formats: gif, webm (default: both)",
)
@click.option(
    "--purpose",
    "-p",
    type=click.Choice([p.value for p in Purpose], case_sensitive=False),
    default=None,
    help="Pick formats from the recommendation for this purpose",
)
@click.option(
    "--preset",
    default=None,
    help="Quality preset (default: from config, normally balanced)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for outputs (default: next to FILE)",
)
@output_format_option
@click.pass_context
def convert_command(
    ctx: click.Context,
    file: str,
    formats: str | None,
    purpose: str | None,
    preset: str | None,
    output_dir: Path | None,
    output_format: str,
) -> None:
    """Convert FILE to GIF and/or WebM.

    Formats are processed one at a time, GIF first. A failed format does
    not stop the others; the command exits nonzero if any format failed.
    """
    config = get_config(ctx)
    video = load_video(file, config)
    quality = get_quality_preset(preset or config.default_preset, config.presets)

    # Metadata only drives advisory estimates and timeouts here, but a
    # duration outside the accepted range still rejects the file
    try:
        metadata = get_analyzer(ctx).analyze_or_none(video)
    except ValidationError as e:
        fail(e, config)

    estimator = EstimationModel(config.timeouts)
    recommender = RecommendationEngine(estimator, locale=config.locale)
    selected = _choose_formats(formats, purpose, metadata, recommender)

    engines = get_engines(ctx)
    session = ConversionSession(
        engines,
        estimator,
        observer=StderrProgressReporter(enabled=output_format != "json"),
        locale=config.locale,
    )
    try:
        results = session.run(
            video,
            selected,
            quality.gif_settings,
            quality.webm_settings,
            metadata=metadata,
            quality_class=quality.conversion_time,
        )
    except KeyboardInterrupt:
        # Ctrl+C - pending formats are marked cancelled, nothing is written
        session.cancel()
        click.echo("\nConversion aborted by user.", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    finally:
        close_engines(engines)

    target_dir = output_dir or (video.path.parent if video.path else Path.cwd())
    target_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(video.name).stem
    written: dict[OutputFormat, str] = {}
    for fmt, blob in results.outputs.items():
        out_path = target_dir / f"{stem}.{fmt.extension}"
        out_path.write_bytes(blob.data)
        written[fmt] = str(out_path)
        logger.info("Wrote %s", out_path)

    jobs = session.jobs
    failed = [job for job in jobs.values() if job.status is JobStatus.ERROR]

    if output_format == "json":
        echo_json(results_to_dict(results, jobs, written))
    else:
        for job in jobs.values():
            label = job.format.value.upper()
            if job.format in written:
                size = format_file_size(results.metadata.sizes[job.format])
                ratio = results.metadata.compression_ratios[job.format]
                click.echo(
                    f"{label}: {written[job.format]} ({size}, {ratio:.0%} of original)"
                )
            else:
                click.echo(f"{label}: {job.message}", err=True)

    if failed:
        sys.exit(ExitCode.CONVERSION_FAILED)
