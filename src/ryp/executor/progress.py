"""FFmpeg progress parsing.

ffmpeg writes a status line to stderr while encoding:

    frame= 1234 fps= 30 q=-1.0 size=  2048kB time=00:01:23.45 bitrate=... speed=2.0x

These helpers turn such lines into FFmpegProgress values and log them at a
bounded rate.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class FFmpegProgress:
    """Parsed FFmpeg progress output."""

    frame: int | None = None
    fps: float | None = None
    bitrate: str | None = None
    out_time_us: int | None = None  # Output time in microseconds
    speed: str | None = None

    @property
    def out_time_seconds(self) -> float | None:
        """Get output time in seconds."""
        if self.out_time_us is not None:
            return self.out_time_us / 1_000_000
        return None

    def get_percent(self, duration_seconds: float | None) -> float:
        """Calculate progress percentage based on duration.

        Args:
            duration_seconds: Total duration of the output in seconds.

        Returns:
            Progress percentage (0.0 to 100.0), or 0.0 if unknown.
        """
        if duration_seconds is None or duration_seconds <= 0:
            return 0.0
        out_time = self.out_time_seconds
        if out_time is None:
            return 0.0
        return min(100.0, (out_time / duration_seconds) * 100)


_FIELD_RE = re.compile(r"(?P<key>frame|fps|bitrate|speed)=\s*(?P<value>\S+)")
_TIME_RE = re.compile(
    r"time=\s*(?P<sign>-?)(?P<h>\d+):(?P<m>\d+):(?P<s>\d+)\.(?P<frac>\d+)"
)

_CONVERTERS = {"frame": int, "fps": float}


def _time_to_us(match: re.Match[str]) -> int | None:
    # ffmpeg prints a negative time before the first frame is written.
    if match["sign"]:
        return None
    whole = int(match["h"]) * 3600 + int(match["m"]) * 60 + int(match["s"])
    return whole * 1_000_000 + int(match["frac"].ljust(6, "0")[:6])


def parse_stderr_progress(line: str) -> FFmpegProgress | None:
    """Parse one ffmpeg stderr line.

    Returns:
        FFmpegProgress, or None if the line carries neither a frame count
        nor an output time.
    """
    if "frame=" not in line and "time=" not in line:
        return None

    progress = FFmpegProgress()
    for match in _FIELD_RE.finditer(line):
        key, raw = match["key"], match["value"]
        if raw == "N/A":
            continue
        try:
            value = _CONVERTERS.get(key, str)(raw)
        except ValueError:
            continue
        setattr(progress, key, value)

    time_match = _TIME_RE.search(line)
    if time_match:
        progress.out_time_us = _time_to_us(time_match)

    if progress.frame is None and progress.out_time_us is None:
        return None
    return progress


class ProgressReporter:
    """Logs ffmpeg progress for one invocation, at most once per interval."""

    def __init__(
        self,
        description: str,
        duration_seconds: float | None = None,
        interval: float = 5.0,
    ) -> None:
        self.description = description
        self.duration_seconds = duration_seconds
        self.interval = interval
        self.last: FFmpegProgress | None = None
        self._last_logged: float | None = None

    def __call__(self, progress: FFmpegProgress) -> None:
        self.last = progress
        now = time.monotonic()
        if self._last_logged is not None and now - self._last_logged < self.interval:
            return
        self._last_logged = now

        if self.duration_seconds:
            logger.info(
                "%s: %.1f%% (speed %s)",
                self.description,
                progress.get_percent(self.duration_seconds),
                progress.speed or "?",
            )
        else:
            logger.info(
                "%s: frame %s (speed %s)",
                self.description,
                progress.frame if progress.frame is not None else "?",
                progress.speed or "?",
            )
