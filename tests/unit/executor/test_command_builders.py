"""Unit tests for the ffmpeg invocation builders."""

from pathlib import Path

import pytest

from ryp.domain import Dimensions, FrameRate, RotationOp
from ryp.executor.commands import (
    build_banner_filter,
    build_final_invocation,
    build_intermediate_invocation,
    build_thumbnail_invocation,
    canvas_fit_filter,
    decode_options,
)
from ryp.planner.operations import CropOp, RotateOp, ScaleOp
from ryp.tools.encoders import select_quality_profile

SOFTWARE = select_quality_profile(False, "best")
HARDWARE = select_quality_profile(True, "fast")
CANVAS = Dimensions(1080, 1920)
FIT = (
    "scale=1080:1920:force_original_aspect_ratio=decrease,"
    "pad=1080:1920:(ow-iw)/2:(oh-ih)/2,setsar=1"
)


def _args_after(args, flag):
    return args[args.index(flag) + 1]


class TestDecodeOptions:
    """Tests for decode_options."""

    def test_hwaccel(self):
        assert decode_options(True) == ("-hwaccel", "auto", "-noautorotate")

    def test_software_decode(self):
        assert decode_options(False) == ("-noautorotate",)


class TestThumbnailInvocation:
    """Tests for build_thumbnail_invocation."""

    def test_seek_before_input_and_crop_last(self):
        inv = build_thumbnail_invocation(
            Path("clip.mov"),
            Path("clip-Thumb-50p-1.png"),
            "15.000",
            (ScaleOp(1920, 1080, preserve_aspect=True), CropOp(608, 1080, 0)),
        )
        assert inv.inputs[0].options[:2] == ("-ss", "15.000")
        assert inv.video_filter == (
            "scale=1920:1080:force_original_aspect_ratio=decrease,crop=608:1080:0:0"
        )
        assert inv.output_args == ("-frames:v", "1", "-q:v", "2")


class TestIntermediateInvocation:
    """Tests for build_intermediate_invocation."""

    def test_with_audio(self):
        inv = build_intermediate_invocation(
            Path("clip.mov"),
            Path("clip_rotated_prores.mov"),
            (RotateOp(RotationOp.ROTATE_90_CW),),
            SOFTWARE,
            has_usable_audio=True,
            hwaccel=False,
        )
        args = list(inv.output_args)
        assert inv.video_filter == "transpose=1"
        assert args[:4] == ["-map", "0:v:0", "-map", "0:a:0"]
        assert _args_after(args, "-c:v") == "prores_ks"
        assert _args_after(args, "-c:a") == "pcm_s16le"
        assert _args_after(args, "-ar") == "48000"
        assert _args_after(args, "-metadata:s:v:0") == "rotate=0"
        assert "-an" not in args
        assert inv.inputs[0].options == ("-noautorotate",)

    def test_without_audio_drops_audio_and_metadata(self):
        inv = build_intermediate_invocation(
            Path("clip.mov"),
            Path("clip_rotated_prores.mov"),
            (RotateOp(RotationOp.ROTATE_90_CW),),
            HARDWARE,
            has_usable_audio=False,
        )
        args = list(inv.output_args)
        assert "0:a:0" not in args
        assert "-an" in args
        assert _args_after(args, "-map_metadata") == "-1"
        assert "-c:a" not in args
        assert _args_after(args, "-c:v") == "prores_videotoolbox"


class TestBannerFilter:
    """Tests for build_banner_filter."""

    def test_canvas_fit(self):
        assert canvas_fit_filter(CANVAS) == FIT

    def test_both_have_audio(self):
        graph, maps = build_banner_filter(CANVAS, True, True)
        assert graph == (
            f"[0:v]{FIT}[iv];[1:v]{FIT}[bv];"
            "[iv][0:a][bv][1:a]concat=n=2:v=1:a=1[v][a]"
        )
        assert maps == ("-map", "[v]", "-map", "[a]")

    def test_silent_intro_is_padded(self):
        graph, maps = build_banner_filter(CANVAS, True, False, intro_duration=3.0)
        assert "anullsrc=r=48000:cl=stereo,atrim=duration=3.000[ia]" in graph
        assert graph.endswith("[iv][ia][bv][1:a]concat=n=2:v=1:a=1[v][a]")
        assert maps == ("-map", "[v]", "-map", "[a]")

    def test_silent_intro_needs_duration(self):
        with pytest.raises(ValueError):
            build_banner_filter(CANVAS, True, False, intro_duration=None)

    @pytest.mark.parametrize("intro_has_audio", [True, False])
    def test_silent_body_concats_video_only(self, intro_has_audio):
        graph, maps = build_banner_filter(CANVAS, False, intro_has_audio)
        assert graph.endswith("[iv][bv]concat=n=2:v=1:a=0[v]")
        assert "[1:a]" not in graph
        assert maps == ("-map", "[v]", "-map", "0:a:0?")


class TestFinalInvocation:
    """Tests for build_final_invocation."""

    def test_direct_encode(self):
        inv = build_final_invocation(
            Path("body.mov"),
            Path("clip-RotateYourPhone-best.mp4"),
            SOFTWARE,
            FrameRate(30000, 1001),
            body_has_audio=True,
        )
        args = list(inv.output_args)
        assert len(inv.inputs) == 1
        assert inv.video_filter is None
        assert inv.filter_complex is None
        assert args[:4] == ["-map", "0:v:0", "-map", "0:a:0"]
        assert _args_after(args, "-c:v") == "libx265"
        assert _args_after(args, "-pix_fmt") == "yuv420p10le"
        assert _args_after(args, "-crf") == "10"
        assert _args_after(args, "-tag:v") == "hvc1"
        assert _args_after(args, "-r") == "30000/1001"
        assert _args_after(args, "-c:a") == "aac"
        assert _args_after(args, "-b:a") == "192k"

    def test_direct_encode_without_audio(self):
        inv = build_final_invocation(
            Path("body.mov"),
            Path("out.mp4"),
            HARDWARE,
            FrameRate(60, 1),
            body_has_audio=False,
        )
        args = list(inv.output_args)
        assert "0:a:0" not in args
        assert _args_after(args, "-b:v") == "8M"
        assert _args_after(args, "-pix_fmt") == "p010le"

    def test_direct_encode_fitted_to_canvas(self):
        inv = build_final_invocation(
            Path("body.mov"),
            Path("out.mp4"),
            SOFTWARE,
            FrameRate(30, 1),
            body_has_audio=True,
            canvas=CANVAS,
        )
        assert inv.video_filter == FIT

    def test_with_intro(self):
        inv = build_final_invocation(
            Path("body.mov"),
            Path("out.mp4"),
            SOFTWARE,
            FrameRate(30, 1),
            body_has_audio=True,
            intro=Path("intro.mp4"),
            intro_has_audio=True,
            canvas=CANVAS,
            duration_seconds=33.0,
        )
        assert [i.path for i in inv.inputs] == [Path("intro.mp4"), Path("body.mov")]
        assert inv.filter_complex is not None
        assert inv.output_args[:4] == ("-map", "[v]", "-map", "[a]")
        assert inv.duration_seconds == 33.0

    def test_intro_requires_canvas(self):
        with pytest.raises(ValueError):
            build_final_invocation(
                Path("body.mov"),
                Path("out.mp4"),
                SOFTWARE,
                FrameRate(30, 1),
                body_has_audio=True,
                intro=Path("intro.mp4"),
            )
