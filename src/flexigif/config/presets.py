"""Quality presets.

Built-in presets (fast, balanced, high_quality, original) plus pydantic
models that validate presets defined in the config file's
``[presets.<name>]`` tables. A preset from the config file with the same
name as a built-in replaces it entirely; omitted fields take the model
defaults, which match the GifSettings/WebMSettings defaults.

Example config:

    [presets.tiny]
    label = "Tiny"
    conversion_time = "fast"
    estimated_size_multiplier = 0.2

    [presets.tiny.gif]
    fps = 8
    width = 320
    height = 240
    quality = "low"
    optimize = false

    [presets.tiny.webm]
    crf = 40
    codec = "vp8"
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from flexigif.domain.enums import ConversionTimeClass, QualityLevel, WebMCodec
from flexigif.domain.models import GifSettings, QualityPreset, WebMSettings

DEFAULT_PRESET_NAME = "balanced"

_BITRATE_PATTERN = re.compile(r"^\d+(\.\d+)?[kKmM]?$")

# Multipliers applied to a base time estimate per speed class
_TIME_CLASS_MULTIPLIERS: dict[ConversionTimeClass, float] = {
    ConversionTimeClass.FAST: 0.5,
    ConversionTimeClass.MEDIUM: 1.0,
    ConversionTimeClass.SLOW: 2.5,
}


BUILTIN_PRESETS: tuple[QualityPreset, ...] = (
    QualityPreset(
        name="fast",
        label="Fast",
        description="Fast conversion, small files",
        gif_settings=GifSettings(
            fps=12, width=400, height=300, quality=QualityLevel.LOW, optimize=False
        ),
        webm_settings=WebMSettings(
            crf=35, codec=WebMCodec.VP8, fps=15, width=480, height=360
        ),
        estimated_size_multiplier=0.3,
        conversion_time=ConversionTimeClass.FAST,
    ),
    QualityPreset(
        name="balanced",
        label="Balanced",
        description="A balance of speed and quality",
        gif_settings=GifSettings(
            fps=15, width=540, height=405, quality=QualityLevel.MEDIUM, optimize=True
        ),
        webm_settings=WebMSettings(
            crf=25, codec=WebMCodec.VP8, fps=24, width=640, height=480
        ),
        estimated_size_multiplier=0.6,
        conversion_time=ConversionTimeClass.MEDIUM,
    ),
    QualityPreset(
        name="high_quality",
        label="High quality",
        description="Close to the original, larger files",
        # Source resolution is kept
        gif_settings=GifSettings(fps=20, quality=QualityLevel.HIGH, optimize=True),
        webm_settings=WebMSettings(crf=15, codec=WebMCodec.VP9, fps=30),
        estimated_size_multiplier=1.2,
        conversion_time=ConversionTimeClass.SLOW,
    ),
    QualityPreset(
        name="original",
        label="Original",
        description="Same quality as the original, largest files",
        # Source frame rate and resolution are kept
        gif_settings=GifSettings(fps=None, quality=QualityLevel.HIGH, optimize=True),
        webm_settings=WebMSettings(crf=10, codec=WebMCodec.VP9),
        estimated_size_multiplier=1.8,
        conversion_time=ConversionTimeClass.SLOW,
    ),
)


class GifSettingsModel(BaseModel):
    """Pydantic model for GIF settings in a preset table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    fps: int | None = Field(default=15, ge=1, le=60)
    width: int | None = Field(default=None, ge=1)
    height: int | None = Field(default=None, ge=1)
    quality: Literal["low", "medium", "high"] = "medium"
    optimize: bool = True

    def to_settings(self) -> GifSettings:
        """Convert to the GifSettings value object."""
        return GifSettings(
            fps=self.fps,
            width=self.width,
            height=self.height,
            quality=QualityLevel(self.quality),
            optimize=self.optimize,
        )


class WebMSettingsModel(BaseModel):
    """Pydantic model for WebM settings in a preset table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    crf: int = Field(default=25, ge=0, le=63)
    codec: Literal["vp8", "vp9"] = "vp8"
    bitrate: str | None = None
    fps: int | None = Field(default=None, ge=1, le=60)
    width: int | None = Field(default=None, ge=1)
    height: int | None = Field(default=None, ge=1)

    @field_validator("codec", mode="before")
    @classmethod
    def casefold_codec(cls, v: Any) -> Any:
        """Accept codec names in any case."""
        return v.casefold() if isinstance(v, str) else v

    @field_validator("bitrate")
    @classmethod
    def validate_bitrate(cls, v: str | None) -> str | None:
        """Validate bitrate strings like "800k" or "1.5M"."""
        if v is not None and not _BITRATE_PATTERN.match(v):
            raise ValueError(f"invalid bitrate {v!r}, expected e.g. '800k' or '1M'")
        return v

    def to_settings(self) -> WebMSettings:
        """Convert to the WebMSettings value object."""
        return WebMSettings(
            crf=self.crf,
            codec=WebMCodec(self.codec),
            bitrate=self.bitrate,
            fps=self.fps,
            width=self.width,
            height=self.height,
        )


class QualityPresetModel(BaseModel):
    """Pydantic model for a ``[presets.<name>]`` table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str | None = None
    description: str = ""
    gif: GifSettingsModel = Field(default_factory=GifSettingsModel)
    webm: WebMSettingsModel = Field(default_factory=WebMSettingsModel)
    estimated_size_multiplier: float = Field(default=1.0, gt=0)
    conversion_time: Literal["fast", "medium", "slow"] = "medium"

    def to_preset(self, name: str) -> QualityPreset:
        """Convert to the QualityPreset value object."""
        return QualityPreset(
            name=name,
            label=self.label or name,
            description=self.description,
            gif_settings=self.gif.to_settings(),
            webm_settings=self.webm.to_settings(),
            estimated_size_multiplier=self.estimated_size_multiplier,
            conversion_time=ConversionTimeClass(self.conversion_time),
        )


def parse_preset(name: str, data: Mapping[str, Any]) -> QualityPreset:
    """Validate a preset table and build a QualityPreset.

    Args:
        name: Preset name (the table key).
        data: Raw table content.

    Returns:
        The validated preset.

    Raises:
        ValueError: If the table is invalid.
    """
    try:
        model = QualityPresetModel.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValueError(f"Invalid preset {name!r}: {e}") from e
    return model.to_preset(name)


def parse_presets(tables: Mapping[str, Any]) -> dict[str, QualityPreset]:
    """Validate every ``[presets.*]`` table from a config file."""
    presets: dict[str, QualityPreset] = {}
    for name, data in tables.items():
        if not isinstance(data, Mapping):
            raise ValueError(f"Invalid preset {name!r}: expected a table")
        presets[name] = parse_preset(name, data)
    return presets


def list_presets(
    overrides: Mapping[str, QualityPreset] | None = None,
) -> list[QualityPreset]:
    """Return built-in presets, with config overrides applied, then extras."""
    overrides = dict(overrides or {})
    result = [overrides.pop(p.name, p) for p in BUILTIN_PRESETS]
    result.extend(overrides.values())
    return result


def get_quality_preset(
    name: str | None,
    overrides: Mapping[str, QualityPreset] | None = None,
) -> QualityPreset:
    """Look up a preset by name.

    Unknown or missing names fall back to the balanced preset.
    """
    presets = {p.name: p for p in list_presets(overrides)}
    if name and name in presets:
        return presets[name]
    return presets[DEFAULT_PRESET_NAME]


def estimated_time_for_preset(base_time_seconds: float, preset: QualityPreset) -> int:
    """Scale a base time estimate by the preset's speed class."""
    multiplier = _TIME_CLASS_MULTIPLIERS[preset.conversion_time]
    return round(base_time_seconds * multiplier)
