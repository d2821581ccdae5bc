"""Environment variable reader with dependency injection support.

All FlexiGif environment variables use the FLEXIGIF_ prefix. The reader
accepts an optional mapping so tests can inject variables without touching
os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "FLEXIGIF_CONFIG_PATH"
ENV_DATA_DIR = "FLEXIGIF_DATA_DIR"
ENV_FFMPEG_PATH = "FLEXIGIF_FFMPEG_PATH"
ENV_FFPROBE_PATH = "FLEXIGIF_FFPROBE_PATH"
ENV_LOCALE = "FLEXIGIF_LOCALE"
ENV_LOG_LEVEL = "FLEXIGIF_LOG_LEVEL"
ENV_LOG_FILE = "FLEXIGIF_LOG_FILE"
ENV_LOG_FORMAT = "FLEXIGIF_LOG_FORMAT"
ENV_ANALYSIS_TIMEOUT = "FLEXIGIF_ANALYSIS_TIMEOUT"


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        # Production usage (reads from os.environ)
        reader = EnvReader()
        timeout = reader.get_float("FLEXIGIF_ANALYSIS_TIMEOUT", 10.0)

        # Testing usage (inject custom env)
        reader = EnvReader(env={"FLEXIGIF_ANALYSIS_TIMEOUT": "3"})
        timeout = reader.get_float("FLEXIGIF_ANALYSIS_TIMEOUT", 10.0)  # 3.0
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string, or default if unset or empty."""
        value = self._env.get(var)
        if not value:
            return default
        return value

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Get a float from environment variable.

        Logs a warning and returns default if the value cannot be parsed.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_path(
        self, var: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """Get a path from environment variable.

        Args:
            var: Environment variable name.
            must_exist: If True, ignore (with a warning) paths that do not
                exist.
            default: Default value if not set or path doesn't exist.

        Returns:
            Expanded Path, or default.
        """
        value = self._env.get(var)
        if not value:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path
