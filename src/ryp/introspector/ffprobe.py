"""FFprobe-based implementation of MediaIntrospector protocol."""

import json
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from ryp.core.subprocess_utils import run_command
from ryp.domain import SourceVideoProperties
from ryp.exceptions import ProbeError, ProbeErrorReason
from ryp.introspector.parsers import parse_ffprobe_output

PROBE_TIMEOUT = 60


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector protocol."""

    def __init__(self, ffprobe_path: Path) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Resolved path to the ffprobe executable.
        """
        self._ffprobe_path = ffprobe_path

    def get_properties(self, path: Path) -> SourceVideoProperties:
        """Extract video properties from a media file.

        Args:
            path: Path to the media file.

        Returns:
            SourceVideoProperties for the first video stream.

        Raises:
            ProbeError: If the file cannot be probed or lacks required fields.
        """
        if not path.exists():
            raise ProbeError(ProbeErrorReason.UNREADABLE, path, "file not found")

        try:
            data = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise ProbeError(
                ProbeErrorReason.UNREADABLE,
                path,
                f"ffprobe timed out after {e.timeout}s",
            ) from e
        except json.JSONDecodeError as e:
            raise ProbeError(
                ProbeErrorReason.UNREADABLE, path, f"invalid ffprobe output: {e}"
            ) from e

        return parse_ffprobe_output(path, data)

    def _run_ffprobe(self, path: Path) -> dict:
        """Run ffprobe and return parsed JSON output.

        Raises:
            ProbeError: If ffprobe exits non-zero or omits the streams list.
            json.JSONDecodeError: If output is not valid JSON.
        """
        stdout, stderr, returncode = run_command(
            [
                self._ffprobe_path,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                path,
            ],
            timeout=PROBE_TIMEOUT,
        )
        if returncode != 0:
            raise ProbeError(
                ProbeErrorReason.UNREADABLE,
                path,
                stderr.strip() or f"ffprobe exited with {returncode}",
            )

        data = json.loads(stdout)
        if "streams" not in data:
            raise ProbeError(
                ProbeErrorReason.UNREADABLE,
                path,
                "missing 'streams' in ffprobe output; "
                "file may be corrupted or not a valid media file",
            )
        return data
