"""Domain models for rotate-your-phone.

These models describe probed media independent of how they were probed.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

# Sources at exactly these dimensions are treated as UHD and prescaled.
UHD_DIMENSIONS: frozenset[tuple[int, int]] = frozenset({(3840, 2160), (2160, 3840)})


@dataclass(frozen=True)
class Dimensions:
    """Frame width and height in pixels."""

    width: int
    height: int

    def swapped(self) -> Dimensions:
        """Return the dimensions with width and height exchanged."""
        return Dimensions(self.height, self.width)

    @property
    def is_portrait(self) -> bool:
        """True if the frame is taller than it is wide."""
        return self.height > self.width

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class FrameRate:
    """Frame rate as a rational number (e.g. 30000/1001)."""

    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        """Validate the rational."""
        if self.numerator <= 0 or self.denominator <= 0:
            raise ValueError(
                f"Frame rate must be positive, got {self.numerator}/{self.denominator}"
            )

    @classmethod
    def parse(cls, value: str) -> FrameRate:
        """Parse an ffprobe rate string such as "30000/1001" or "25".

        Raises:
            ValueError: If the value is not a positive rational.
        """
        text = value.strip()
        if "/" in text:
            num, _, den = text.partition("/")
            return cls(int(num), int(den))
        fraction = Fraction(text)
        return cls(fraction.numerator, fraction.denominator)

    @property
    def fps(self) -> float:
        """Frame rate as frames per second."""
        return self.numerator / self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


@dataclass(frozen=True)
class SourceVideoProperties:
    """Properties of a probed video file, captured once per run."""

    width: int
    height: int
    frame_rate: FrameRate
    rotation_tag: int | None = None
    """Rotation metadata in degrees; None when the file carries no tag."""

    duration_seconds: float | None = None
    has_audio: bool = False
    """True if stream enumeration found at least one audio stream."""

    audio_duration_seconds: float | None = None
    """Duration reported by the first audio stream (container fallback)."""

    def __post_init__(self) -> None:
        """Validate dimensions."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid dimensions {self.width}x{self.height}")

    @property
    def dimensions(self) -> Dimensions:
        """Stored frame dimensions."""
        return Dimensions(self.width, self.height)

    @property
    def is_4k(self) -> bool:
        """True for exact 3840x2160 or 2160x3840 sources."""
        return (self.width, self.height) in UHD_DIMENSIONS

    @property
    def has_usable_audio(self) -> bool:
        """True if an audio stream exists and reports a positive duration.

        Some encoders attach an empty audio stream; it is treated as no audio
        so that no silent or broken track is carried forward.
        """
        return (
            self.has_audio
            and self.audio_duration_seconds is not None
            and self.audio_duration_seconds > 0
        )
