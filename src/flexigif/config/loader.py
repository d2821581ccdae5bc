"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the CLI on top of get_config())
2. Environment variables (FLEXIGIF_*)
3. Config file (~/.flexigif/config.toml)
4. Default values

Environment variables:
- FLEXIGIF_CONFIG_PATH: Path to config file (overrides default location)
- FLEXIGIF_DATA_DIR: Path to FlexiGif data directory (overrides ~/.flexigif/)
- FLEXIGIF_FFMPEG_PATH: Path to ffmpeg executable
- FLEXIGIF_FFPROBE_PATH: Path to ffprobe executable
- FLEXIGIF_LOCALE: Locale for user-facing messages (en, ko)
- FLEXIGIF_LOG_LEVEL / FLEXIGIF_LOG_FILE / FLEXIGIF_LOG_FORMAT: Logging
- FLEXIGIF_ANALYSIS_TIMEOUT: Metadata analysis wait in seconds
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from flexigif.config.env import (
    ENV_ANALYSIS_TIMEOUT,
    ENV_CONFIG_PATH,
    ENV_DATA_DIR,
    ENV_FFMPEG_PATH,
    ENV_FFPROBE_PATH,
    ENV_LOCALE,
    ENV_LOG_FILE,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    EnvReader,
)
from flexigif.config.models import (
    FlexiGifConfig,
    LimitsConfig,
    LoggingConfig,
    TimeoutConfig,
    ToolPathsConfig,
)
from flexigif.config.presets import parse_presets

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".flexigif"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

_config: FlexiGifConfig | None = None
_config_lock = threading.Lock()


def get_data_dir() -> Path:
    """Get the FlexiGif data directory.

    Can be overridden by FLEXIGIF_DATA_DIR environment variable.
    Supports tilde expansion.

    Returns:
        Path to the data directory (~/.flexigif/ by default).
    """
    env_path = os.environ.get(ENV_DATA_DIR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_DIR


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by FLEXIGIF_CONFIG_PATH environment variable.

    Returns:
        Path to config file.
    """
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / "config.toml"


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise on parse failures. If False (default),
            log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        tomllib.TOMLDecodeError: If strict and the file is not valid TOML.
        OSError: If strict and the file cannot be read.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            raise
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return data


def _section(file_config: dict, name: str) -> dict[str, Any]:
    """Return a config file table, or an empty dict."""
    value = file_config.get(name, {})
    if not isinstance(value, dict):
        logger.warning("Config section [%s] is not a table, ignoring", name)
        return {}
    return value


def _path_or_none(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def build_config(
    file_config: dict,
    env: EnvReader | None = None,
) -> FlexiGifConfig:
    """Build FlexiGifConfig from a parsed config file and the environment.

    Args:
        file_config: Parsed TOML content (may be empty).
        env: Environment reader. None reads os.environ.

    Returns:
        The merged configuration.

    Raises:
        ValueError: If a value fails validation.
    """
    env = env or EnvReader()

    tools_file = _section(file_config, "tools")
    tools = ToolPathsConfig(
        ffmpeg=env.get_path(ENV_FFMPEG_PATH)
        or _path_or_none(tools_file.get("ffmpeg")),
        ffprobe=env.get_path(ENV_FFPROBE_PATH)
        or _path_or_none(tools_file.get("ffprobe")),
    )

    limits_file = _section(file_config, "limits")
    limits_defaults = LimitsConfig()
    limits = LimitsConfig(
        max_file_size=int(
            limits_file.get("max_file_size", limits_defaults.max_file_size)
        ),
        min_file_size=int(
            limits_file.get("min_file_size", limits_defaults.min_file_size)
        ),
        min_duration=float(
            limits_file.get("min_duration", limits_defaults.min_duration)
        ),
        max_duration=float(
            limits_file.get("max_duration", limits_defaults.max_duration)
        ),
        analysis_timeout=env.get_float(
            ENV_ANALYSIS_TIMEOUT,
            float(
                limits_file.get("analysis_timeout", limits_defaults.analysis_timeout)
            ),
        ),
    )

    timeouts_file = _section(file_config, "timeouts")
    timeout_defaults = TimeoutConfig()
    timeouts = TimeoutConfig(
        min_seconds=float(
            timeouts_file.get("min_seconds", timeout_defaults.min_seconds)
        ),
        max_seconds=float(
            timeouts_file.get("max_seconds", timeout_defaults.max_seconds)
        ),
        multiplier=float(timeouts_file.get("multiplier", timeout_defaults.multiplier)),
    )

    logging_file = _section(file_config, "logging")
    logging_defaults = LoggingConfig()
    logging_config = LoggingConfig(
        level=env.get_str(ENV_LOG_LEVEL)
        or logging_file.get("level", logging_defaults.level),
        file=env.get_path(ENV_LOG_FILE, must_exist=False)
        or _path_or_none(logging_file.get("file")),
        format=env.get_str(ENV_LOG_FORMAT)
        or logging_file.get("format", logging_defaults.format),
        include_stderr=bool(
            logging_file.get("include_stderr", logging_defaults.include_stderr)
        ),
        max_bytes=int(logging_file.get("max_bytes", logging_defaults.max_bytes)),
        backup_count=int(
            logging_file.get("backup_count", logging_defaults.backup_count)
        ),
    )

    return FlexiGifConfig(
        tools=tools,
        limits=limits,
        timeouts=timeouts,
        logging=logging_config,
        locale=env.get_str(ENV_LOCALE) or file_config.get("locale", "en"),
        default_preset=file_config.get("default_preset", "balanced"),
        presets=parse_presets(_section(file_config, "presets")),
    )


def get_config(config_path: Path | None = None) -> FlexiGifConfig:
    """Get FlexiGif configuration with full precedence handling.

    The result is cached for the process; pass config_path or call
    clear_config_cache() to reload.

    Args:
        config_path: Path to config file (overrides FLEXIGIF_CONFIG_PATH).
            Passing a path bypasses and replaces the cache.

    Returns:
        FlexiGifConfig with merged configuration.
    """
    global _config

    if config_path is None and _config is not None:
        return _config

    with _config_lock:
        if config_path is None and _config is not None:
            return _config
        config = build_config(load_config_file(config_path))
        _config = config
        return config


def clear_config_cache() -> None:
    """Clear the cached configuration so the next get_config() reloads."""
    global _config
    with _config_lock:
        _config = None
