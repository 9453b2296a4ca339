"""Unit tests for domain models."""

import pytest

from ryp.domain import (
    Dimensions,
    FrameRate,
    RotationOp,
    SourceVideoProperties,
)


class TestDimensions:
    """Tests for Dimensions."""

    def test_swapped(self):
        assert Dimensions(1920, 1080).swapped() == Dimensions(1080, 1920)

    def test_is_portrait(self):
        assert Dimensions(1080, 1920).is_portrait
        assert not Dimensions(1920, 1080).is_portrait
        assert not Dimensions(1080, 1080).is_portrait

    def test_str(self):
        assert str(Dimensions(1080, 1920)) == "1080x1920"


class TestFrameRate:
    """Tests for FrameRate parsing and validation."""

    def test_parse_rational(self):
        rate = FrameRate.parse("30000/1001")
        assert rate == FrameRate(30000, 1001)
        assert str(rate) == "30000/1001"
        assert rate.fps == pytest.approx(29.97, abs=0.01)

    def test_parse_integer(self):
        assert FrameRate.parse("25") == FrameRate(25, 1)

    def test_parse_decimal(self):
        assert FrameRate.parse("29.97") == FrameRate(2997, 100)

    def test_zero_denominator_rejected(self):
        with pytest.raises(ValueError):
            FrameRate.parse("30/0")

    def test_zero_numerator_rejected(self):
        with pytest.raises(ValueError):
            FrameRate(0, 1)

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            FrameRate.parse("abc")


class TestSourceVideoProperties:
    """Tests for SourceVideoProperties."""

    def test_rejects_non_positive_dimensions(self):
        with pytest.raises(ValueError):
            SourceVideoProperties(width=0, height=1080, frame_rate=FrameRate(30, 1))

    @pytest.mark.parametrize(
        "width,height,expected",
        [
            (3840, 2160, True),
            (2160, 3840, True),
            (1920, 1080, False),
            (4096, 2160, False),
        ],
    )
    def test_is_4k_requires_exact_uhd(self, width, height, expected):
        props = SourceVideoProperties(width, height, FrameRate(30, 1))
        assert props.is_4k is expected

    def test_usable_audio_needs_positive_duration(self):
        rate = FrameRate(30, 1)
        assert SourceVideoProperties(
            1920, 1080, rate, has_audio=True, audio_duration_seconds=12.5
        ).has_usable_audio
        assert not SourceVideoProperties(
            1920, 1080, rate, has_audio=True, audio_duration_seconds=0.0
        ).has_usable_audio
        assert not SourceVideoProperties(
            1920, 1080, rate, has_audio=True, audio_duration_seconds=None
        ).has_usable_audio
        assert not SourceVideoProperties(1920, 1080, rate).has_usable_audio

    def test_rotation_absent_differs_from_zero(self):
        rate = FrameRate(30, 1)
        assert SourceVideoProperties(1920, 1080, rate).rotation_tag is None
        assert SourceVideoProperties(1920, 1080, rate, rotation_tag=0).rotation_tag == 0


class TestRotationOp:
    """Tests for RotationOp."""

    def test_quarter_turns(self):
        assert RotationOp.ROTATE_90_CW.quarter_turns == 1
        assert RotationOp.ROTATE_90_CCW.quarter_turns == 1
        assert RotationOp.ROTATE_180.quarter_turns == 2

    def test_swaps_dimensions(self):
        assert RotationOp.ROTATE_90_CW.swaps_dimensions
        assert not RotationOp.ROTATE_180.swaps_dimensions
