"""Configuration management for FlexiGif.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (FLEXIGIF_*)
3. Config file (~/.flexigif/config.toml)
4. Default values (lowest priority)
"""

from flexigif.config.env import EnvReader
from flexigif.config.loader import (
    build_config,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from flexigif.config.models import (
    FlexiGifConfig,
    LimitsConfig,
    LoggingConfig,
    TimeoutConfig,
    ToolPathsConfig,
)
from flexigif.config.presets import (
    BUILTIN_PRESETS,
    DEFAULT_PRESET_NAME,
    estimated_time_for_preset,
    get_quality_preset,
    list_presets,
    parse_preset,
)

__all__ = [
    # Models
    "FlexiGifConfig",
    "LimitsConfig",
    "LoggingConfig",
    "TimeoutConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "build_config",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Presets
    "BUILTIN_PRESETS",
    "DEFAULT_PRESET_NAME",
    "estimated_time_for_preset",
    "get_quality_preset",
    "list_presets",
    "parse_preset",
]
