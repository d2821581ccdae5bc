"""CLI presets command."""

import click

from flexigif.cli._common import echo_json, get_config, output_format_option
from flexigif.cli.output import format_preset_human, preset_to_dict
from flexigif.config.presets import list_presets


@click.command("presets")
@output_format_option
@click.pass_context
def presets_command(ctx: click.Context, output_format: str) -> None:
    """List quality presets, including those defined in the config file."""
    config = get_config(ctx)
    presets = list_presets(config.presets)

    if output_format == "json":
        echo_json(
            {
                "default": config.default_preset,
                "presets": [preset_to_dict(p) for p in presets],
            }
        )
        return

    click.echo(f"Default preset: {config.default_preset}")
    for preset in presets:
        click.echo("")
        click.echo(format_preset_human(preset))
