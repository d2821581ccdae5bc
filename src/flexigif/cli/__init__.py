"""CLI module for FlexiGif."""

import logging
import sys
from pathlib import Path

import click

from flexigif.cli.exit_codes import ExitCode
from flexigif.config import get_config
from flexigif.logging import configure_logging_from_cli

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="flexigif")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.flexigif/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """FlexiGif - Convert videos to GIF and WebM."""
    ctx.ensure_object(dict)

    # Tests may pass a prepared config through obj
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path)
        except ValueError as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            sys.exit(ExitCode.CONFIG_ERROR)

    config = ctx.obj["config"]
    configure_logging_from_cli(
        config.logging, level=log_level, file=log_file, json_format=log_json
    )
    logger.debug(
        "FlexiGif starting: locale=%s, default_preset=%s",
        config.locale,
        config.default_preset,
    )


def _register_commands() -> None:
    from flexigif.cli.analyze import analyze_command
    from flexigif.cli.convert import convert_command
    from flexigif.cli.estimate import estimate_command
    from flexigif.cli.presets import presets_command
    from flexigif.cli.recommend import recommend_command

    main.add_command(analyze_command)
    main.add_command(recommend_command)
    main.add_command(estimate_command)
    main.add_command(convert_command)
    main.add_command(presets_command)


_register_commands()
