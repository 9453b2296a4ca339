"""External tool discovery and encoder capability detection.

Tools are resolved from a configured path first, then from PATH. Hardware
backend availability is decided once per run from the encoder list ffmpeg
advertises.
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from ryp.exceptions import ToolNotAvailableError

logger = logging.getLogger(__name__)

# Encoders that make up the hardware (VideoToolbox) backend. Both the
# intermediate and the delivery encoder must be present.
HARDWARE_ENCODERS: tuple[str, ...] = ("hevc_videotoolbox", "prores_videotoolbox")

# " V....D libx265   H.265 / HEVC (codec hevc)"
_ENCODER_LINE = re.compile(r"^\s*[VAS][A-Z.]{5}\s+(\S+)")


class EncoderLister(Protocol):
    """Anything that can report the encoders an ffmpeg build supports."""

    def list_encoders(self) -> set[str]: ...


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, configured_path: Path | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Raises:
        ToolNotAvailableError: If the tool cannot be found.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise ToolNotAvailableError(name)
    logger.debug("Using %s at %s", name, path)
    return path


def parse_encoder_list(output: str) -> set[str]:
    """Parse ``ffmpeg -encoders`` output into a set of encoder names.

    Args:
        output: stdout of ``ffmpeg -hide_banner -encoders``.

    Returns:
        Set of encoder identifiers (e.g. {"libx265", "aac"}).
    """
    encoders: set[str] = set()
    for line in output.splitlines():
        match = _ENCODER_LINE.match(line)
        if match and match.group(1) != "=":
            encoders.add(match.group(1))
    return encoders


def hardware_available(
    encoders: Iterable[str],
    required: tuple[str, ...] = HARDWARE_ENCODERS,
) -> bool:
    """Return True if every hardware encoder in ``required`` is listed."""
    available = set(encoders)
    return all(encoder in available for encoder in required)


def detect_hardware_backend(
    lister: EncoderLister,
    disabled: bool = False,
    required: tuple[str, ...] = HARDWARE_ENCODERS,
) -> bool:
    """Decide whether the hardware backend should be used for this run.

    Args:
        lister: Source of the ffmpeg encoder list.
        disabled: True when hardware acceleration was explicitly disabled;
            the software backend is then used without querying ffmpeg.
        required: Encoder identifiers the hardware backend needs.

    Returns:
        True if the hardware backend is available and allowed.
    """
    if disabled:
        logger.info("Hardware acceleration disabled; using software encoders")
        return False

    encoders = lister.list_encoders()
    if hardware_available(encoders, required):
        logger.info("Hardware encoders available: %s", ", ".join(required))
        return True

    missing = [e for e in required if e not in encoders]
    logger.info(
        "Hardware encoders not available (missing %s); using software encoders",
        ", ".join(missing),
    )
    return False
