"""Engine invocation values and ffmpeg command rendering.

An EngineInvocation is a complete, immutable description of one ffmpeg run:
its inputs (each with input options), one filter description and one
output. The command line is only rendered when the invocation is executed
or printed.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EngineInput:
    """One ffmpeg input with the options that precede its ``-i``."""

    path: Path
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class EngineInvocation:
    """A single ffmpeg invocation.

    Attributes:
        stage: Pipeline stage issuing the invocation (used in errors/logs).
        inputs: Ordered inputs.
        output: Output artifact path.
        output_args: Mapping, codec and muxer arguments before the output.
        video_filter: Simple filter graph (``-vf``), if any.
        filter_complex: Complex filter graph (``-filter_complex``), if any.
        description: Human readable label for progress logging.
        duration_seconds: Expected output duration, for progress percentages.
    """

    stage: str
    inputs: tuple[EngineInput, ...]
    output: Path
    output_args: tuple[str, ...] = ()
    video_filter: str | None = None
    filter_complex: str | None = None
    description: str = ""
    duration_seconds: float | None = None

    def __post_init__(self) -> None:
        if not self.inputs:
            raise ValueError("EngineInvocation needs at least one input")
        if self.video_filter and self.filter_complex:
            raise ValueError("Use either video_filter or filter_complex, not both")

    @property
    def label(self) -> str:
        """Description for logs, defaulting to stage and output name."""
        return self.description or f"{self.stage} ({self.output.name})"


def build_command(ffmpeg_path: Path | str, invocation: EngineInvocation) -> list[str]:
    """Render an invocation as an ffmpeg argument list.

    Args:
        ffmpeg_path: Path to the ffmpeg executable.
        invocation: The invocation to render.

    Returns:
        List of command-line arguments.
    """
    cmd = [str(ffmpeg_path), "-y", "-hide_banner", "-nostdin"]

    for engine_input in invocation.inputs:
        cmd.extend(engine_input.options)
        cmd.extend(["-i", str(engine_input.path)])

    if invocation.video_filter:
        cmd.extend(["-vf", invocation.video_filter])
    elif invocation.filter_complex:
        cmd.extend(["-filter_complex", invocation.filter_complex])

    cmd.extend(invocation.output_args)
    cmd.append(str(invocation.output))
    return cmd


def format_command(cmd: list[str]) -> str:
    """Shell-quoted rendering of a command, for display."""
    return shlex.join(cmd)
