"""CLI estimate command."""

import click

from flexigif.cli._common import (
    analyze_video,
    echo_json,
    get_config,
    get_engines,
    load_video,
    output_format_option,
)
from flexigif.cli.output import estimate_to_dict
from flexigif.config.presets import estimated_time_for_preset, get_quality_preset
from flexigif.domain.enums import OutputFormat
from flexigif.estimation.model import EstimationModel


@click.command("estimate")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--preset",
    default=None,
    help="Quality preset (default: from config, normally balanced)",
)
@output_format_option
@click.pass_context
def estimate_command(
    ctx: click.Context,
    file: str,
    preset: str | None,
    output_format: str,
) -> None:
    """Estimate output sizes, conversion times and timeouts for FILE."""
    config = get_config(ctx)
    video = load_video(file, config)
    metadata = analyze_video(ctx, video)
    quality = get_quality_preset(preset or config.default_preset, config.presets)

    engines = get_engines(ctx)
    model = EstimationModel(config.timeouts)

    rows = {}
    for fmt in OutputFormat:
        settings = (
            quality.gif_settings if fmt is OutputFormat.GIF else quality.webm_settings
        )
        engine_estimate = engines[fmt].estimate(video, settings, metadata)
        predicted = model.predict_conversion_time(
            fmt, metadata, quality.conversion_time
        )
        rows[fmt] = {
            "size": model.estimate_size(fmt, metadata),
            "engine": estimate_to_dict(engine_estimate),
            "preset_time_seconds": estimated_time_for_preset(
                engine_estimate.estimated_time, quality
            ),
            "predicted_time_seconds": round(predicted, 1),
            "timeout_seconds": model.calculate_timeout(predicted),
        }

    if output_format == "json":
        echo_json(
            {"preset": quality.name, **{fmt.value: row for fmt, row in rows.items()}}
        )
        return

    click.echo(f"Preset: {quality.label} ({quality.name})")
    for fmt, row in rows.items():
        engine_row = row["engine"]
        click.echo(f"\n{fmt.value.upper()}")
        click.echo(f"  Estimated size:  {row['size']}")
        click.echo(
            f"  With settings:   {engine_row['estimated_size_mb']:.1f} MB, "
            f"~{row['preset_time_seconds']}s"
        )
        click.echo(
            f"  Predicted time:  {row['predicted_time_seconds']}s "
            f"(timeout {row['timeout_seconds']:g}s)"
        )
        for warning in engine_row["warnings"]:
            click.echo(f"  Warning: {warning}")
