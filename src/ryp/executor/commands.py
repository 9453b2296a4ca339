"""Builders for the ffmpeg invocations the pipeline issues.

Each builder returns an EngineInvocation; nothing here touches the
filesystem or runs a process.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ryp.domain import Dimensions, FrameRate
from ryp.executor.invocation import EngineInput, EngineInvocation
from ryp.planner.operations import GeometricOp, render_filter_chain
from ryp.tools.encoders import QualityProfile

INTERMEDIATE_AUDIO_ARGS: tuple[str, ...] = ("-c:a", "pcm_s16le", "-ar", "48000")
INTERMEDIATE_NO_AUDIO_ARGS: tuple[str, ...] = ("-an", "-map_metadata", "-1")
FINAL_AUDIO_ARGS: tuple[str, ...] = ("-c:a", "aac", "-ar", "48000", "-b:a", "192k")
FINAL_VIDEO_TAG: tuple[str, ...] = ("-tag:v", "hvc1")
THUMBNAIL_OUTPUT_ARGS: tuple[str, ...] = ("-frames:v", "1", "-q:v", "2")


def decode_options(hwaccel: bool) -> tuple[str, ...]:
    """Input options for decoding a video file.

    Autorotation is always disabled so the planned correction is the only
    rotation applied.
    """
    options: tuple[str, ...] = ()
    if hwaccel:
        options += ("-hwaccel", "auto")
    return options + ("-noautorotate",)


def build_thumbnail_invocation(
    source: Path,
    output: Path,
    timestamp: str,
    ops: Sequence[GeometricOp],
    hwaccel: bool = True,
) -> EngineInvocation:
    """Extract one still frame at ``timestamp``.

    Args:
        source: Source video.
        output: PNG to write.
        timestamp: Seek position in seconds, formatted with three decimals.
        ops: Geometric operations ending in the crop window.
        hwaccel: Use hardware decoding when available.
    """
    return EngineInvocation(
        stage="thumbnails",
        inputs=(
            EngineInput(source, ("-ss", timestamp) + decode_options(hwaccel)),
        ),
        output=output,
        video_filter=render_filter_chain(ops) or None,
        output_args=THUMBNAIL_OUTPUT_ARGS,
        description=f"thumbnail {output.name}",
    )


def build_intermediate_invocation(
    source: Path,
    output: Path,
    body_ops: Sequence[GeometricOp],
    profile: QualityProfile,
    has_usable_audio: bool,
    hwaccel: bool = True,
    duration_seconds: float | None = None,
) -> EngineInvocation:
    """Rotate (and scale) the source into the ProRes intermediate.

    Audio is carried as 48 kHz PCM only when the source has usable audio.
    Otherwise audio and global metadata are dropped, which keeps a
    zero-length audio stream from breaking the later concat.
    """
    output_args: list[str] = ["-map", "0:v:0"]
    if has_usable_audio:
        output_args += ["-map", "0:a:0"]
    output_args += profile.intermediate_args()
    output_args += ["-metadata:s:v:0", "rotate=0"]
    if has_usable_audio:
        output_args += INTERMEDIATE_AUDIO_ARGS
    else:
        output_args += INTERMEDIATE_NO_AUDIO_ARGS

    return EngineInvocation(
        stage="intermediate",
        inputs=(EngineInput(source, decode_options(hwaccel)),),
        output=output,
        video_filter=render_filter_chain(body_ops),
        output_args=tuple(output_args),
        description="ProRes intermediate",
        duration_seconds=duration_seconds,
    )


def canvas_fit_filter(canvas: Dimensions) -> str:
    """Fit a frame inside ``canvas``, letterboxed, with square pixels."""
    w, h = canvas.width, canvas.height
    return (
        f"scale={w}:{h}:force_original_aspect_ratio=decrease,"
        f"pad={w}:{h}:(ow-iw)/2:(oh-ih)/2,setsar=1"
    )


def _normalize_to_canvas(label_in: str, label_out: str, canvas: Dimensions) -> str:
    return f"[{label_in}]{canvas_fit_filter(canvas)}[{label_out}]"


def build_banner_filter(
    canvas: Dimensions,
    body_has_audio: bool,
    intro_has_audio: bool,
    intro_duration: float | None = None,
) -> tuple[str, tuple[str, ...]]:
    """Filter graph concatenating the intro and the body.

    Both video streams are fitted into ``canvas`` (letterboxed, square
    pixels) so concat sees identical geometry.

    Args:
        canvas: Target frame size for both segments.
        body_has_audio: The intermediate carries usable audio.
        intro_has_audio: The intro clip carries usable audio.
        intro_duration: Intro length in seconds, needed to synthesize
            silence when only the body has audio.

    Returns:
        Tuple of (filter_complex string, map arguments).

    Raises:
        ValueError: If silence is needed but the intro duration is unknown.
    """
    parts = [
        _normalize_to_canvas("0:v", "iv", canvas),
        _normalize_to_canvas("1:v", "bv", canvas),
    ]

    if body_has_audio and intro_has_audio:
        parts.append("[iv][0:a][bv][1:a]concat=n=2:v=1:a=1[v][a]")
        return ";".join(parts), ("-map", "[v]", "-map", "[a]")

    if body_has_audio:
        if intro_duration is None or intro_duration <= 0:
            raise ValueError("Intro duration is required to pad the intro with silence")
        parts.append(
            f"anullsrc=r=48000:cl=stereo,atrim=duration={intro_duration:.3f}[ia]"
        )
        parts.append("[iv][ia][bv][1:a]concat=n=2:v=1:a=1[v][a]")
        return ";".join(parts), ("-map", "[v]", "-map", "[a]")

    # Body is silent: concat video only and let the intro's audio (if any)
    # play over the start.
    parts.append("[iv][bv]concat=n=2:v=1:a=0[v]")
    return ";".join(parts), ("-map", "[v]", "-map", "0:a:0?")


def build_final_invocation(
    body: Path,
    output: Path,
    profile: QualityProfile,
    frame_rate: FrameRate,
    body_has_audio: bool,
    intro: Path | None = None,
    intro_has_audio: bool = False,
    intro_duration: float | None = None,
    canvas: Dimensions | None = None,
    hwaccel: bool = True,
    duration_seconds: float | None = None,
) -> EngineInvocation:
    """Encode the delivery file, with or without the intro banner.

    Args:
        body: The intermediate artifact.
        output: Delivery file path.
        profile: Selected quality profile.
        frame_rate: Source frame rate, pinned on the output.
        body_has_audio: The intermediate carries usable audio.
        intro: Intro clip to prepend, or None for the no-banner path.
        intro_has_audio: The intro clip carries usable audio.
        intro_duration: Intro length in seconds.
        canvas: Concat canvas; required with an intro.
        hwaccel: Use hardware decoding when available.
        duration_seconds: Expected output duration, for progress.
    """
    tail: list[str] = [
        *profile.final_args(),
        *FINAL_VIDEO_TAG,
        "-r",
        str(frame_rate),
        *FINAL_AUDIO_ARGS,
    ]

    if intro is None:
        maps = ["-map", "0:v:0"]
        if body_has_audio:
            maps += ["-map", "0:a:0"]
        return EngineInvocation(
            stage="final_encode",
            inputs=(EngineInput(body, decode_options(hwaccel)),),
            output=output,
            video_filter=canvas_fit_filter(canvas) if canvas is not None else None,
            output_args=tuple(maps + tail),
            description="HEVC encode",
            duration_seconds=duration_seconds,
        )

    if canvas is None:
        raise ValueError("A concat canvas is required when prepending an intro")

    graph, maps_tuple = build_banner_filter(
        canvas, body_has_audio, intro_has_audio, intro_duration
    )
    return EngineInvocation(
        stage="final_encode",
        inputs=(
            EngineInput(intro, decode_options(hwaccel)),
            EngineInput(body, decode_options(hwaccel)),
        ),
        output=output,
        filter_complex=graph,
        output_args=maps_tuple + tuple(tail),
        description="HEVC encode with intro",
        duration_seconds=duration_seconds,
    )
