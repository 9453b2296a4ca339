"""Exceptions raised by the rotate-your-phone pipeline.

Every fatal error derives from RypError so the CLI can report it with a
single except clause. ThumbnailExtractionWarning is the only non-fatal
class: the thumbnail stage catches it, logs it and carries on.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class RypError(Exception):
    """Base class for pipeline errors."""


class ValidationError(RypError):
    """Raised for bad arguments, configuration or missing required files.

    Always raised before any media processing starts.
    """


class InvalidQualityTier(ValidationError):
    """Raised when a quality tier name is not one of the known tiers."""

    def __init__(self, tier: str, valid: tuple[str, ...]) -> None:
        self.tier = tier
        self.valid = valid
        super().__init__(
            f"Invalid quality level '{tier}'. Must be one of: {', '.join(valid)}"
        )


class MissingInputError(ValidationError):
    """Raised when a required input file (source or intro) does not exist."""

    def __init__(self, role: str, path: Path) -> None:
        self.role = role
        self.path = path
        super().__init__(f"{role} not found: {path}")


class ToolNotAvailableError(ValidationError):
    """Raised when ffmpeg or ffprobe cannot be located."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(
            f"Required tool not available: {tool_name}. "
            f"Install ffmpeg or set RYP_{tool_name.upper()}_PATH."
        )


class ProbeErrorReason(Enum):
    """Why source metadata could not be read."""

    MISSING_DIMENSIONS = "missing_dimensions"
    MISSING_FRAME_RATE = "missing_frame_rate"
    MISSING_DURATION = "missing_duration"
    UNREADABLE = "unreadable"


class ProbeError(RypError):
    """Raised when a media file's metadata cannot be read."""

    def __init__(self, reason: ProbeErrorReason, path: Path, detail: str = "") -> None:
        self.reason = reason
        self.path = path
        self.detail = detail
        messages = {
            ProbeErrorReason.MISSING_DIMENSIONS: "Could not detect video dimensions",
            ProbeErrorReason.MISSING_FRAME_RATE: "Could not detect video framerate",
            ProbeErrorReason.MISSING_DURATION: "Could not detect video duration",
            ProbeErrorReason.UNREADABLE: "Could not read media metadata",
        }
        message = f"{messages[reason]} for {path}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class StagePreconditionError(RypError):
    """Raised when an artifact a stage requires is missing."""

    def __init__(self, stage: str, missing: Path, message: str = "") -> None:
        self.stage = stage
        self.missing = missing
        super().__init__(
            message
            or f"Cannot run {stage} stage: required artifact '{missing}' not found."
        )


class MissingIntermediateArtifact(StagePreconditionError):
    """Raised when the intermediate stage is skipped but its artifact is absent."""

    def __init__(self, missing: Path) -> None:
        super().__init__(
            "intermediate",
            missing,
            f"Cannot skip intermediate stage: required artifact '{missing}' "
            "not found. Run without --skip-rotation first, or ensure the file exists.",
        )


class EngineExecutionError(RypError):
    """Raised when an ffmpeg invocation exits non-zero."""

    def __init__(
        self,
        stage: str,
        artifact: Path,
        returncode: int,
        stderr_tail: str = "",
    ) -> None:
        self.stage = stage
        self.artifact = artifact
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        super().__init__(
            f"ffmpeg failed during {stage} stage (exit {returncode}) "
            f"while writing '{artifact}'"
        )


class ThumbnailExtractionWarning(RypError):
    """A single still frame could not be extracted (non-fatal)."""

    def __init__(self, output_path: Path, returncode: int) -> None:
        self.output_path = output_path
        self.returncode = returncode
        super().__init__(
            f"Failed to generate thumbnail '{output_path}' (exit {returncode})"
        )
