"""Short-lived tool invocations (ffprobe, ``ffmpeg -encoders``).

Encodes are not run here: ryp.executor.engine streams their stderr and
can stop them mid-run.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - ffprobe/ffmpeg are external tools
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: int = 120,
) -> tuple[str, str, int]:
    """Run a tool to completion and capture its output.

    Args:
        args: Executable followed by its arguments.
        timeout: Seconds before the child is killed.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: The tool did not finish in time.
        OSError: The executable could not be started.
    """
    argv = [str(arg) for arg in args]
    tool = Path(argv[0]).name
    logger.debug("Running %s", " ".join(argv), extra={"command": tool})

    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv built from resolved tool paths
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "%s did not finish within %ds",
            tool,
            timeout,
            extra={"command": tool, "timeout_seconds": timeout},
        )
        raise

    logger.debug(
        "%s exited with %d",
        tool,
        completed.returncode,
        extra={
            "command": tool,
            "elapsed_seconds": round(time.monotonic() - started, 3),
        },
    )
    return completed.stdout or "", completed.stderr or "", completed.returncode
