"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the CLI)
2. Profile settings (applied by the CLI)
3. Environment variables (RYP_*)
4. Config file (~/.ryp/config.toml)
5. Default values

Environment variables:
- RYP_CONFIG_PATH: Path to config file (overrides default location)
- RYP_FFMPEG_PATH: Path to ffmpeg executable
- RYP_FFPROBE_PATH: Path to ffprobe executable
- RYP_INTRO_PATH: Path to the intro clip
- RYP_DEFAULT_QUALITY: Default quality tier
- RYP_LOG_LEVEL: Log level
- RYP_LOG_FILE: Log file path
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from ryp.config.env import EnvReader
from ryp.config.models import (
    DEFAULT_CONFIG_DIR,
    LoggingConfig,
    PipelineConfig,
    RypConfig,
    ToolPathsConfig,
)
from ryp.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


class ConfigError(ValidationError):
    """Raised when the config file cannot be read or holds invalid values."""


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the config file path, honoring RYP_CONFIG_PATH."""
    reader = env or EnvReader()
    return reader.get_path("RYP_CONFIG_PATH", default=DEFAULT_CONFIG_FILE) or (
        DEFAULT_CONFIG_FILE
    )


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Returns:
        Parsed dictionary, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _reject_unknown(name: str, section: dict[str, Any], known: set[str]) -> None:
    unknown = set(section) - known
    if unknown:
        raise ConfigError(
            f"Unknown keys in [{name}]: {sorted(unknown)}. "
            f"Valid keys are: {sorted(known)}"
        )


def get_config(
    config_path: Path | None = None,
    env: EnvReader | None = None,
) -> RypConfig:
    """Load configuration from file and environment.

    Args:
        config_path: Config file to read. None uses the default location.
        env: Environment reader. None reads os.environ.

    Returns:
        Merged RypConfig.

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    reader = env or EnvReader()
    path = config_path or get_default_config_path(reader)
    data = load_toml_file(path)
    if data:
        logger.debug("Loaded config from %s", path)

    tools_data = _section(data, "tools")
    pipeline_data = _section(data, "pipeline")
    logging_data = _section(data, "logging")
    _reject_unknown("tools", tools_data, {"ffmpeg", "ffprobe"})
    _reject_unknown(
        "pipeline",
        pipeline_data,
        {
            "intro",
            "default_quality",
            "intermediate_suffix",
            "thumbnail_workers",
            "engine_timeout_seconds",
            "hardware_encoders",
        },
    )
    _reject_unknown(
        "logging",
        logging_data,
        {"level", "file", "format", "include_stderr", "max_bytes", "backup_count"},
    )

    defaults = PipelineConfig()
    try:
        tools = ToolPathsConfig(
            ffmpeg=reader.get_path("RYP_FFMPEG_PATH")
            or _optional_path(tools_data.get("ffmpeg")),
            ffprobe=reader.get_path("RYP_FFPROBE_PATH")
            or _optional_path(tools_data.get("ffprobe")),
        )

        intro = reader.get_path("RYP_INTRO_PATH")
        if intro is None:
            intro = (
                _optional_path(pipeline_data["intro"])
                if "intro" in pipeline_data
                else defaults.intro
            )
        pipeline = PipelineConfig(
            intro=intro,
            default_quality=reader.get_str("RYP_DEFAULT_QUALITY")
            or pipeline_data.get("default_quality", defaults.default_quality),
            intermediate_suffix=pipeline_data.get(
                "intermediate_suffix", defaults.intermediate_suffix
            ),
            thumbnail_workers=reader.get_int("RYP_THUMBNAIL_WORKERS")
            or int(pipeline_data.get("thumbnail_workers", defaults.thumbnail_workers)),
            engine_timeout_seconds=pipeline_data.get("engine_timeout_seconds"),
            hardware_encoders=tuple(
                pipeline_data.get("hardware_encoders", defaults.hardware_encoders)
            ),
        )

        log_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=reader.get_str("RYP_LOG_LEVEL")
            or logging_data.get("level", log_defaults.level),
            file=reader.get_path("RYP_LOG_FILE")
            or _optional_path(logging_data.get("file")),
            format=logging_data.get("format", log_defaults.format),
            include_stderr=reader.get_bool(
                "RYP_LOG_STDERR",
                bool(logging_data.get("include_stderr", log_defaults.include_stderr)),
            ),
            max_bytes=int(logging_data.get("max_bytes", log_defaults.max_bytes)),
            backup_count=int(
                logging_data.get("backup_count", log_defaults.backup_count)
            ),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    return RypConfig(tools=tools, pipeline=pipeline, logging=logging_config)
