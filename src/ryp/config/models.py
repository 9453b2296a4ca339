"""Configuration data models.

Each section of ~/.ryp/config.toml maps to one dataclass. Validation runs
in __post_init__ so an invalid value fails at load time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ryp.tools.detection import HARDWARE_ENCODERS
from ryp.tools.encoders import VALID_TIERS
from ryp.workflow.artifacts import DEFAULT_INTERMEDIATE_SUFFIX

DEFAULT_CONFIG_DIR = Path.home() / ".ryp"
DEFAULT_INTRO_PATH = DEFAULT_CONFIG_DIR / "media" / "RotateYourPhoneHD.mp4"


@dataclass
class ToolPathsConfig:
    """Explicit paths to external tools (None means PATH lookup)."""

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class PipelineConfig:
    """Defaults for pipeline runs."""

    # Intro clip prepended unless --skip-banner
    intro: Path | None = DEFAULT_INTRO_PATH

    # Quality tier used when --quality is not given
    default_quality: str = "best"

    # Appended to the source stem to name the intermediate
    intermediate_suffix: str = DEFAULT_INTERMEDIATE_SUFFIX

    # Parallel thumbnail extractions (1 = sequential)
    thumbnail_workers: int = 1

    # Per-ffmpeg-invocation timeout (None = no limit)
    engine_timeout_seconds: int | None = None

    # Encoders that must all be present to use the hardware backend
    hardware_encoders: tuple[str, ...] = HARDWARE_ENCODERS

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.default_quality not in VALID_TIERS:
            raise ValueError(
                f"default_quality must be one of {list(VALID_TIERS)}, "
                f"got {self.default_quality}"
            )
        if self.thumbnail_workers < 1:
            raise ValueError(
                f"thumbnail_workers must be at least 1, got {self.thumbnail_workers}"
            )
        if self.engine_timeout_seconds is not None and self.engine_timeout_seconds <= 0:
            raise ValueError(
                "engine_timeout_seconds must be positive, "
                f"got {self.engine_timeout_seconds}"
            )
        if not self.intermediate_suffix:
            raise ValueError("intermediate_suffix must not be empty")
        if not self.hardware_encoders:
            raise ValueError("hardware_encoders must name at least one encoder")


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class RypConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
