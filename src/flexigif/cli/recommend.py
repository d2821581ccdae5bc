"""CLI recommend command."""

import click

from flexigif.cli._common import (
    analyze_video,
    echo_json,
    get_config,
    load_video,
    output_format_option,
)
from flexigif.cli.output import format_recommendation_human, recommendation_to_dict
from flexigif.domain.enums import Purpose
from flexigif.domain.models import UserIntent
from flexigif.estimation.model import EstimationModel
from flexigif.recommendation import RecommendationEngine, platform_from_name

PURPOSE_CHOICES = [p.value for p in Purpose]


@click.command("recommend")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--purpose",
    "-p",
    type=click.Choice(PURPOSE_CHOICES, case_sensitive=False),
    default=Purpose.UNKNOWN.value,
    help="What the result is for (default: unknown)",
)
@click.option(
    "--platform",
    "platforms",
    multiple=True,
    help="Target platform, e.g. discord or twitter. Repeatable.",
)
@output_format_option
@click.pass_context
def recommend_command(
    ctx: click.Context,
    file: str,
    purpose: str,
    platforms: tuple[str, ...],
    output_format: str,
) -> None:
    """Recommend output formats for FILE and a purpose."""
    config = get_config(ctx)
    video = load_video(file, config)
    metadata = analyze_video(ctx, video)

    intent = UserIntent(
        purpose=Purpose.parse(purpose),
        platforms=tuple(platform_from_name(name) for name in platforms),
    )
    engine = RecommendationEngine(
        EstimationModel(config.timeouts), locale=config.locale
    )
    recommendation = engine.analyze(intent, metadata)

    if output_format == "json":
        echo_json(recommendation_to_dict(recommendation))
    else:
        click.echo(format_recommendation_human(recommendation))
