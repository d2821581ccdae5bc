"""Animated GIF conversion engine."""

from __future__ import annotations

from flexigif.domain.enums import OutputFormat
from flexigif.domain.models import (
    EstimateResult,
    GifSettings,
    VideoFile,
    VideoMetadata,
)
from flexigif.estimation.engine_estimates import estimate_gif_output
from flexigif.executor.base import BaseEngine, ConversionPlan
from flexigif.executor.commands import build_gif_commands
from flexigif.executor.interface import TranscodeBackend
from flexigif.introspector.analyzer import MetadataAnalyzer


class GifEngine(BaseEngine[GifSettings]):
    """Convert videos to GIF, two-pass with a generated palette when optimizing.

    Args:
        backend: Transcode backend owned by this engine.
        analyzer: Used by estimate() when no metadata is passed.
        locale: Locale for estimate warnings.
    """

    format = OutputFormat.GIF

    def __init__(
        self,
        backend: TranscodeBackend,
        analyzer: MetadataAnalyzer | None = None,
        locale: str | None = None,
    ) -> None:
        super().__init__(backend, locale)
        self.analyzer = analyzer

    def plan(
        self, input_name: str, token: str, settings: GifSettings
    ) -> ConversionPlan:
        output_name = f"output_{token}.{self.format.extension}"
        if not settings.optimize:
            return ConversionPlan(
                commands=build_gif_commands(input_name, output_name, settings),
                output_name=output_name,
            )
        palette_name = f"palette_{token}.png"
        return ConversionPlan(
            commands=build_gif_commands(
                input_name, output_name, settings, palette_name
            ),
            output_name=output_name,
            intermediate_names=(palette_name,),
        )

    def estimate(
        self,
        file: VideoFile,
        settings: GifSettings,
        metadata: VideoMetadata | None = None,
    ) -> EstimateResult:
        """Estimate output size and time; analyzes file if metadata is None.

        Raises:
            ValueError: If metadata is None and no analyzer was given.
        """
        if metadata is None:
            if self.analyzer is None:
                raise ValueError("GIF estimate needs metadata or an analyzer")
            metadata = self.analyzer.analyze(file)
        return estimate_gif_output(metadata, settings, self.locale)
