"""CLI analyze command."""

import click

from flexigif.cli._common import (
    analyze_video,
    echo_json,
    get_config,
    load_video,
    output_format_option,
)
from flexigif.cli.output import format_metadata_human, metadata_to_dict


@click.command("analyze")
@click.argument("file", type=click.Path(exists=False))
@output_format_option
@click.pass_context
def analyze_command(ctx: click.Context, file: str, output_format: str) -> None:
    """Show duration, resolution and inferred frame rate/codec of FILE."""
    video = load_video(file, get_config(ctx))
    metadata = analyze_video(ctx, video)

    if output_format == "json":
        echo_json({"file": video.name, **metadata_to_dict(metadata)})
    else:
        click.echo(format_metadata_human(video.name, metadata))
