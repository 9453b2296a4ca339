"""Unit tests for tool discovery and hardware encoder detection."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from ryp.exceptions import ToolNotAvailableError
from ryp.tools.detection import (
    detect_hardware_backend,
    find_tool,
    hardware_available,
    parse_encoder_list,
    require_tool,
)

ENCODERS_OUTPUT = """Encoders:
 V..... = Video
 A..... = Audio
 S..... = Subtitle
 .F.... = Frame-level multithreading
 ------
 V....D libx265              libx265 H.265 / HEVC (codec hevc)
 V....D hevc_videotoolbox    VideoToolbox H.265 Encoder (codec hevc)
 V....D prores_ks            Apple ProRes (iCodec Pro) (codec prores)
 VF...D prores_videotoolbox  VideoToolbox ProRes Encoder (codec prores)
 A....D aac                  AAC (Advanced Audio Coding)
"""


class FakeLister:
    def __init__(self, encoders):
        self.encoders = set(encoders)
        self.calls = 0

    def list_encoders(self):
        self.calls += 1
        return self.encoders


class TestParseEncoderList:
    """Tests for parse_encoder_list."""

    def test_parses_names(self):
        encoders = parse_encoder_list(ENCODERS_OUTPUT)
        assert encoders == {
            "libx265",
            "hevc_videotoolbox",
            "prores_ks",
            "prores_videotoolbox",
            "aac",
        }

    def test_empty_output(self):
        assert parse_encoder_list("") == set()


class TestHardwareAvailable:
    """Tests for hardware_available."""

    def test_both_required(self):
        assert hardware_available({"hevc_videotoolbox", "prores_videotoolbox"})

    def test_one_missing(self):
        assert not hardware_available({"hevc_videotoolbox", "libx265"})

    def test_custom_requirement(self):
        assert hardware_available({"hevc_nvenc"}, required=("hevc_nvenc",))


class TestDetectHardwareBackend:
    """Tests for detect_hardware_backend."""

    def test_disabled_skips_query(self):
        lister = FakeLister({"hevc_videotoolbox", "prores_videotoolbox"})
        assert detect_hardware_backend(lister, disabled=True) is False
        assert lister.calls == 0

    def test_available(self):
        lister = FakeLister({"hevc_videotoolbox", "prores_videotoolbox"})
        assert detect_hardware_backend(lister) is True

    def test_missing_logs_names(self, caplog):
        lister = FakeLister({"hevc_videotoolbox"})
        with caplog.at_level(logging.INFO, logger="ryp.tools.detection"):
            assert detect_hardware_backend(lister) is False
        assert "prores_videotoolbox" in caplog.text


class TestFindTool:
    """Tests for find_tool and require_tool."""

    def test_configured_path_wins(self, temp_dir: Path):
        tool = temp_dir / "ffmpeg"
        tool.touch()
        with patch("ryp.tools.detection.shutil.which") as mock_which:
            assert find_tool("ffmpeg", tool) == tool
        mock_which.assert_not_called()

    def test_bad_configured_path_falls_back_to_path(self, temp_dir: Path):
        with patch(
            "ryp.tools.detection.shutil.which", return_value="/usr/bin/ffmpeg"
        ):
            assert find_tool("ffmpeg", temp_dir / "missing") == Path("/usr/bin/ffmpeg")

    def test_not_found(self):
        with patch("ryp.tools.detection.shutil.which", return_value=None):
            assert find_tool("ffprobe") is None

    def test_require_tool_raises(self):
        with patch("ryp.tools.detection.shutil.which", return_value=None):
            with pytest.raises(ToolNotAvailableError) as exc_info:
                require_tool("ffprobe")
        assert exc_info.value.tool_name == "ffprobe"
        assert "RYP_FFPROBE_PATH" in str(exc_info.value)
