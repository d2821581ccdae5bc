"""Silent WebM (VP8/VP9) conversion engine."""

from __future__ import annotations

from flexigif.domain.enums import OutputFormat
from flexigif.domain.models import (
    EstimateResult,
    VideoFile,
    VideoMetadata,
    WebMSettings,
)
from flexigif.estimation.engine_estimates import estimate_webm_output
from flexigif.executor.base import BaseEngine, ConversionPlan
from flexigif.executor.commands import build_webm_command


class WebMEngine(BaseEngine[WebMSettings]):
    """Convert videos to WebM without audio in a single pass."""

    format = OutputFormat.WEBM

    def plan(
        self, input_name: str, token: str, settings: WebMSettings
    ) -> ConversionPlan:
        output_name = f"output_{token}.{self.format.extension}"
        return ConversionPlan(
            commands=[build_webm_command(input_name, output_name, settings)],
            output_name=output_name,
        )

    def estimate(
        self,
        file: VideoFile,
        settings: WebMSettings,
        metadata: VideoMetadata | None = None,
    ) -> EstimateResult:
        # Based on the input size alone; metadata is not needed
        return estimate_webm_output(file, settings, self.locale)
