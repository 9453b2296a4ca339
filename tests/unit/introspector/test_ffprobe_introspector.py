"""Unit tests for FFprobeIntrospector and StubIntrospector."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from ryp.exceptions import ProbeError, ProbeErrorReason
from ryp.introspector import FFprobeIntrospector, StubIntrospector

FFPROBE = Path("/usr/bin/ffprobe")

PROBE_JSON = {
    "streams": [
        {
            "codec_type": "video",
            "width": 1080,
            "height": 1920,
            "avg_frame_rate": "60/1",
        },
        {"codec_type": "audio", "duration": "4.0"},
    ],
    "format": {"duration": "4.0"},
}


class TestFFprobeIntrospector:
    """Tests for FFprobeIntrospector with run_command mocked."""

    def test_missing_file(self, temp_dir: Path):
        introspector = FFprobeIntrospector(FFPROBE)
        with pytest.raises(ProbeError) as exc_info:
            introspector.get_properties(temp_dir / "missing.mov")
        assert exc_info.value.reason is ProbeErrorReason.UNREADABLE

    def test_parses_output(self, source_video: Path):
        introspector = FFprobeIntrospector(FFPROBE)
        with patch(
            "ryp.introspector.ffprobe.run_command",
            return_value=(json.dumps(PROBE_JSON), "", 0),
        ) as mock_run:
            props = introspector.get_properties(source_video)

        args = mock_run.call_args[0][0]
        assert args[0] == FFPROBE
        assert "-show_streams" in args
        assert "-show_format" in args
        assert args[-1] == source_video
        assert (props.width, props.height) == (1080, 1920)
        assert props.has_usable_audio

    def test_nonzero_exit(self, source_video: Path):
        introspector = FFprobeIntrospector(FFPROBE)
        with patch(
            "ryp.introspector.ffprobe.run_command",
            return_value=("", "Invalid data found when processing input", 1),
        ):
            with pytest.raises(ProbeError) as exc_info:
                introspector.get_properties(source_video)
        assert exc_info.value.reason is ProbeErrorReason.UNREADABLE
        assert "Invalid data" in str(exc_info.value)

    def test_invalid_json(self, source_video: Path):
        introspector = FFprobeIntrospector(FFPROBE)
        with patch(
            "ryp.introspector.ffprobe.run_command", return_value=("not json", "", 0)
        ):
            with pytest.raises(ProbeError) as exc_info:
                introspector.get_properties(source_video)
        assert exc_info.value.reason is ProbeErrorReason.UNREADABLE

    def test_missing_streams(self, source_video: Path):
        introspector = FFprobeIntrospector(FFPROBE)
        with patch(
            "ryp.introspector.ffprobe.run_command",
            return_value=(json.dumps({"format": {}}), "", 0),
        ):
            with pytest.raises(ProbeError):
                introspector.get_properties(source_video)

    def test_timeout(self, source_video: Path):
        introspector = FFprobeIntrospector(FFPROBE)
        with patch(
            "ryp.introspector.ffprobe.run_command",
            side_effect=subprocess.TimeoutExpired(cmd="ffprobe", timeout=60),
        ):
            with pytest.raises(ProbeError) as exc_info:
                introspector.get_properties(source_video)
        assert "timed out" in str(exc_info.value)


class TestStubIntrospector:
    """Tests for the stub introspector."""

    def test_lookup_by_name(self, props_factory):
        props = props_factory()
        stub = StubIntrospector({"a.mov": props})
        assert stub.get_properties(Path("/anywhere/a.mov")) is props
        assert stub.calls == [Path("/anywhere/a.mov")]

    def test_unknown_file(self):
        with pytest.raises(ProbeError):
            StubIntrospector().get_properties(Path("b.mov"))
