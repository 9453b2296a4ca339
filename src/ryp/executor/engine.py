"""FFmpeg engine adapter.

Runs EngineInvocations as ffmpeg subprocesses, streaming stderr on a reader
thread so progress can be logged while the encode runs and a timeout can
be enforced. Failures are reported as exit statuses; the pipeline stages
decide what a non-zero status means.
"""

from __future__ import annotations

import logging
import queue
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ryp.core import run_command
from ryp.executor.invocation import EngineInvocation, build_command, format_command
from ryp.executor.progress import ProgressReporter, parse_stderr_progress
from ryp.tools.detection import parse_encoder_list

logger = logging.getLogger(__name__)

TIMEOUT_RETURNCODE = -1


@dataclass(frozen=True)
class EngineResult:
    """Outcome of one engine invocation."""

    returncode: int
    stderr_tail: tuple[str, ...] = ()
    """Last stderr lines, kept for error reports."""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def stderr_text(self) -> str:
        return "".join(self.stderr_tail)


class Engine(Protocol):
    """Interface the pipeline uses to run media operations."""

    def run(self, invocation: EngineInvocation) -> EngineResult:
        """Execute an invocation and report its exit status."""
        ...

    def list_encoders(self) -> set[str]:
        """Return the encoder identifiers the engine supports."""
        ...


class FFmpegEngine:
    """Engine backed by an ffmpeg executable."""

    STDERR_DRAIN_TIMEOUT: float = 5.0
    STDERR_TAIL_LINES: int = 20

    def __init__(
        self,
        ffmpeg_path: Path,
        timeout: float | None = None,
        dry_run: bool = False,
        progress_interval: float = 5.0,
    ) -> None:
        """Initialize the engine.

        Args:
            ffmpeg_path: Path to the ffmpeg executable.
            timeout: Per-invocation timeout in seconds. None means no limit.
            dry_run: Record commands instead of executing them.
            progress_interval: Minimum seconds between progress log lines.
        """
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout
        self.dry_run = dry_run
        self.progress_interval = progress_interval
        self.planned_commands: list[list[str]] = []
        self._lock = threading.Lock()

    def list_encoders(self) -> set[str]:
        """Query ffmpeg for its encoder list.

        Returns:
            Set of encoder identifiers, empty if the query fails.
        """
        try:
            stdout, stderr, returncode = run_command(
                [self.ffmpeg_path, "-hide_banner", "-encoders"], timeout=30
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.warning("Could not list ffmpeg encoders: %s", e)
            return set()

        if returncode != 0:
            logger.warning(
                "ffmpeg -encoders exited with %d: %s", returncode, stderr.strip()
            )
            return set()
        return parse_encoder_list(stdout)

    def run(self, invocation: EngineInvocation) -> EngineResult:
        """Execute an invocation.

        Safe to call from several threads; each call gets its own result.

        Args:
            invocation: The ffmpeg invocation to run.

        Returns:
            EngineResult with the ffmpeg exit status (TIMEOUT_RETURNCODE on
            timeout, 0 for a dry run) and the last stderr lines.

        Raises:
            KeyboardInterrupt: Re-raised after the ffmpeg child is stopped.
        """
        cmd = build_command(self.ffmpeg_path, invocation)

        if self.dry_run:
            with self._lock:
                self.planned_commands.append(cmd)
            logger.info("Dry run, not executing: %s", format_command(cmd))
            return EngineResult(0)

        logger.debug("Running ffmpeg for %s: %s", invocation.label, format_command(cmd))
        reporter = ProgressReporter(
            invocation.label,
            invocation.duration_seconds,
            interval=self.progress_interval,
        )
        returncode, tail = self._run_with_timeout(cmd, invocation.label, reporter)

        if returncode == 0:
            logger.debug("%s finished", invocation.label)
        else:
            logger.debug(
                "%s exited with %d; stderr tail:\n%s",
                invocation.label,
                returncode,
                "".join(tail),
            )
        return EngineResult(returncode, tuple(tail))

    def _run_with_timeout(
        self,
        cmd: list[str],
        description: str,
        reporter: ProgressReporter,
    ) -> tuple[int, list[str]]:
        """Run ffmpeg with a stderr reader thread.

        Returns:
            Tuple of (return code, last stderr lines).
        """
        process = subprocess.Popen(  # nosec B603
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )

        tail: deque[str] = deque(maxlen=self.STDERR_TAIL_LINES)
        stderr_queue: queue.Queue[str | None] = queue.Queue()
        stop_event = threading.Event()

        def read_stderr() -> None:
            """Read stderr lines and put them in the queue."""
            try:
                assert process.stderr is not None
                for line in process.stderr:
                    if stop_event.is_set():
                        break
                    stderr_queue.put(line)
            except (ValueError, OSError) as e:
                logger.debug("Stderr reader stopped: %s", e)
            finally:
                stderr_queue.put(None)

        reader_thread = threading.Thread(target=read_stderr, daemon=True)
        reader_thread.start()

        def handle_line(line: str) -> None:
            tail.append(line)
            progress = parse_stderr_progress(line)
            if progress:
                reporter(progress)

        timeout_expired = False
        start_time = time.monotonic()
        try:
            while True:
                if self.timeout is not None:
                    if time.monotonic() - start_time >= self.timeout:
                        timeout_expired = True
                        break

                if process.poll() is not None:
                    break

                try:
                    line = stderr_queue.get(timeout=1.0)
                except queue.Empty:
                    continue
                if line is None:
                    break
                handle_line(line)
        except KeyboardInterrupt:
            logger.warning("Interrupted; stopping ffmpeg (%s)", description)
            stop_event.set()
            self._stop_process(process)
            raise

        if timeout_expired:
            logger.warning("%s timed out after %s seconds", description, self.timeout)
            stop_event.set()
            self._stop_process(process, kill=True)
            reader_thread.join(timeout=2.0)
            return TIMEOUT_RETURNCODE, list(tail)

        # ffmpeg has exited; the reader stops at EOF.
        reader_thread.join(timeout=self.STDERR_DRAIN_TIMEOUT)
        while True:
            try:
                line = stderr_queue.get_nowait()
            except queue.Empty:
                break
            if line is None:
                break
            handle_line(line)

        process.wait()
        return process.returncode, list(tail)

    @staticmethod
    def _stop_process(process: subprocess.Popen[str], kill: bool = False) -> None:
        """Terminate (or kill) ffmpeg and reap it."""
        if process.poll() is not None:
            return
        if kill:
            process.kill()
        else:
            process.terminate()
        try:
            process.wait(timeout=10)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
