"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into SourceVideoProperties.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
from pathlib import Path
from typing import Any

from ryp.domain import FrameRate, SourceVideoProperties
from ryp.exceptions import ProbeError, ProbeErrorReason

logger = logging.getLogger(__name__)


def _log_validation_warning(
    message: str,
    field_name: str,
    file_path: str | None,
    *args: object,
) -> None:
    """Log a validation warning with optional file context."""
    context = f" in {file_path}" if file_path else ""
    logger.warning(f"{message}{context}", field_name, *args)


def validate_positive_int(
    value: Any,
    field_name: str,
    file_path: str | None = None,
) -> int | None:
    """Validate that a value is a positive integer or None.

    Args:
        value: Value to validate.
        field_name: Field name for warning messages.
        file_path: File path context for warnings.

    Returns:
        Validated value or None if invalid.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        _log_validation_warning(
            "Expected int for %s, got %s", field_name, file_path, type(value).__name__
        )
        return None
    if value <= 0:
        _log_validation_warning(
            "Invalid non-positive %s: %d", field_name, file_path, value
        )
        return None
    return value


def parse_duration(value: Any) -> float | None:
    """Parse duration string from ffprobe into seconds.

    Args:
        value: Duration string from ffprobe (e.g., "3600.000"), "N/A" or None.

    Returns:
        Duration in seconds as float, or None if parsing fails or negative.
    """
    if value is None:
        return None
    try:
        duration = float(value)
    except (ValueError, TypeError):
        return None
    if duration < 0:
        return None
    return duration


def parse_frame_rate(stream: dict) -> FrameRate | None:
    """Extract the frame rate of a video stream.

    Prefers avg_frame_rate (the rate the output is pinned to), falling back
    to r_frame_rate. "0/0" is ffprobe's marker for an unknown rate.
    """
    for key in ("avg_frame_rate", "r_frame_rate"):
        raw = stream.get(key)
        if not raw or raw == "0/0":
            continue
        try:
            return FrameRate.parse(str(raw))
        except (ValueError, ZeroDivisionError):
            logger.debug("Unparseable %s: %r", key, raw)
    return None


def parse_rotation(stream: dict) -> int | None:
    """Extract the rotation tag of a video stream in degrees.

    Older ffmpeg builds report a "rotate" stream tag. Newer builds drop the
    tag and expose a display matrix in side_data_list whose "rotation" is
    counter-clockwise, so it is negated into the tag convention.

    Returns:
        Rotation in degrees, or None if the stream carries no rotation.
    """
    tags = stream.get("tags") or {}
    raw_tag = tags.get("rotate")
    if raw_tag is not None:
        try:
            return int(float(raw_tag))
        except (ValueError, TypeError):
            logger.warning("Ignoring non-numeric rotate tag: %r", raw_tag)
            return None

    for side_data in stream.get("side_data_list") or []:
        if "rotation" not in side_data:
            continue
        try:
            rotation = int(float(side_data["rotation"]))
        except (ValueError, TypeError):
            logger.warning(
                "Ignoring non-numeric display matrix rotation: %r",
                side_data["rotation"],
            )
            return None
        return (-rotation) % 360
    return None


def _first_stream(streams: list[dict], codec_type: str) -> dict | None:
    return next((s for s in streams if s.get("codec_type") == codec_type), None)


def parse_ffprobe_output(path: Path, data: dict) -> SourceVideoProperties:
    """Parse complete ffprobe JSON output into SourceVideoProperties.

    Args:
        path: Path to the probed file (for error messages).
        data: Parsed ffprobe JSON output (-show_streams -show_format).

    Returns:
        SourceVideoProperties for the first video stream.

    Raises:
        ProbeError: If dimensions or frame rate cannot be read.
    """
    file_path = str(path)
    streams = data.get("streams") or []
    format_info = data.get("format") or {}

    video = _first_stream(streams, "video")
    if video is None:
        raise ProbeError(
            ProbeErrorReason.MISSING_DIMENSIONS, path, "no video stream found"
        )

    width = validate_positive_int(video.get("width"), "width", file_path)
    height = validate_positive_int(video.get("height"), "height", file_path)
    if width is None or height is None:
        raise ProbeError(ProbeErrorReason.MISSING_DIMENSIONS, path)

    frame_rate = parse_frame_rate(video)
    if frame_rate is None:
        raise ProbeError(ProbeErrorReason.MISSING_FRAME_RATE, path)

    container_duration = parse_duration(format_info.get("duration"))
    duration = container_duration
    if duration is None:
        duration = parse_duration(video.get("duration"))

    audio = _first_stream(streams, "audio")
    audio_duration: float | None = None
    if audio is not None:
        audio_duration = parse_duration(audio.get("duration"))
        if audio_duration is None:
            audio_duration = container_duration

    return SourceVideoProperties(
        width=width,
        height=height,
        frame_rate=frame_rate,
        rotation_tag=parse_rotation(video),
        duration_seconds=duration,
        has_audio=audio is not None,
        audio_duration_seconds=audio_duration,
    )
