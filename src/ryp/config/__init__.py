"""Configuration: config file, environment, profiles and logging setup."""

from ryp.config.env import EnvReader
from ryp.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    get_config,
    get_default_config_path,
    load_toml_file,
)
from ryp.config.logging_factory import build_logging_config
from ryp.config.models import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_INTRO_PATH,
    LoggingConfig,
    PipelineConfig,
    RypConfig,
    ToolPathsConfig,
)
from ryp.config.profiles import (
    OptionProfile,
    ProfileError,
    ProfileNotFoundError,
    get_profiles_directory,
    list_profiles,
    load_profile,
)

__all__ = [
    "EnvReader",
    "DEFAULT_CONFIG_FILE",
    "ConfigError",
    "get_config",
    "get_default_config_path",
    "load_toml_file",
    "build_logging_config",
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_INTRO_PATH",
    "LoggingConfig",
    "PipelineConfig",
    "RypConfig",
    "ToolPathsConfig",
    "OptionProfile",
    "ProfileError",
    "ProfileNotFoundError",
    "get_profiles_directory",
    "list_profiles",
    "load_profile",
]
