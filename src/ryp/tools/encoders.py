"""Backend and quality-tier selection.

Maps (hardware available, tier name) to a QualityProfile holding the
concrete encoder identifiers and rate-control parameters for both the
intermediate and the final encode.

Hardware (VideoToolbox) encoders are driven by a bitrate target; software
encoders (libx265) by CRF and preset. A profile never carries both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ryp.domain import Backend, PixelFormat, QualityTier
from ryp.exceptions import InvalidQualityTier

logger = logging.getLogger(__name__)

HARDWARE_BITRATES: dict[QualityTier, str] = {
    QualityTier.FAST: "8M",
    QualityTier.MEDIUM: "12M",
    QualityTier.HIGH: "15M",
    QualityTier.BEST: "20M",
}

SOFTWARE_CRF_PRESETS: dict[QualityTier, tuple[int, str]] = {
    QualityTier.FAST: (13, "fast"),
    QualityTier.MEDIUM: (12, "medium"),
    QualityTier.HIGH: (11, "slow"),
    QualityTier.BEST: (10, "slower"),
}

VALID_TIERS: tuple[str, ...] = tuple(t.value for t in QualityTier)

# ProRes 422 HQ is profile 3 for both ProRes encoders.
_HARDWARE_INTERMEDIATE = ("prores_videotoolbox", (("profile:v", "3"),))
_SOFTWARE_INTERMEDIATE = ("prores_ks", (("profile:v", "3"), ("vendor", "apl0")))


@dataclass(frozen=True)
class RateControl:
    """Rate control for the final encode: a bitrate or a CRF with preset."""

    bitrate: str | None = None
    crf: int | None = None
    preset: str | None = None

    def __post_init__(self) -> None:
        """Enforce that exactly one rate-control mode is populated."""
        has_bitrate = self.bitrate is not None
        has_crf = self.crf is not None or self.preset is not None
        if has_bitrate == has_crf:
            raise ValueError("RateControl needs either a bitrate or crf+preset")
        if has_crf and (self.crf is None or self.preset is None):
            raise ValueError("CRF rate control needs both crf and preset")

    def to_args(self) -> list[str]:
        """ffmpeg arguments for this rate control."""
        if self.bitrate is not None:
            return ["-b:v", self.bitrate]
        return ["-crf", str(self.crf), "-preset", str(self.preset)]


@dataclass(frozen=True)
class QualityProfile:
    """Concrete encoder settings selected for a run."""

    tier: QualityTier
    backend: Backend
    intermediate_codec: str
    intermediate_options: tuple[tuple[str, str], ...]
    final_codec: str
    final_pixel_format: PixelFormat
    rate_control: RateControl

    def intermediate_args(self) -> list[str]:
        """ffmpeg arguments selecting the intermediate video encoder."""
        args = ["-c:v", self.intermediate_codec]
        for key, value in self.intermediate_options:
            args.extend([f"-{key}", value])
        return args

    def final_args(self) -> list[str]:
        """ffmpeg arguments selecting the final video encoder."""
        return [
            "-c:v",
            self.final_codec,
            "-pix_fmt",
            self.final_pixel_format.value,
            *self.rate_control.to_args(),
        ]


def parse_quality_tier(name: str) -> QualityTier:
    """Resolve a tier name. Names match exactly, without case folding.

    Raises:
        InvalidQualityTier: If ``name`` is not a known tier.
    """
    try:
        return QualityTier(name)
    except ValueError:
        raise InvalidQualityTier(name, VALID_TIERS) from None


def select_quality_profile(
    hardware_available: bool,
    tier: str | QualityTier,
) -> QualityProfile:
    """Select encoders and rate control for a backend and tier.

    Args:
        hardware_available: True to use the hardware backend.
        tier: Quality tier name or enum.

    Returns:
        The QualityProfile for this combination.

    Raises:
        InvalidQualityTier: If ``tier`` is not a known tier name.
    """
    quality = tier if isinstance(tier, QualityTier) else parse_quality_tier(tier)

    if hardware_available:
        codec, options = _HARDWARE_INTERMEDIATE
        profile = QualityProfile(
            tier=quality,
            backend=Backend.HARDWARE,
            intermediate_codec=codec,
            intermediate_options=options,
            final_codec="hevc_videotoolbox",
            final_pixel_format=PixelFormat.P010LE,
            rate_control=RateControl(bitrate=HARDWARE_BITRATES[quality]),
        )
    else:
        codec, options = _SOFTWARE_INTERMEDIATE
        crf, preset = SOFTWARE_CRF_PRESETS[quality]
        profile = QualityProfile(
            tier=quality,
            backend=Backend.SOFTWARE,
            intermediate_codec=codec,
            intermediate_options=options,
            final_codec="libx265",
            final_pixel_format=PixelFormat.YUV420P10LE,
            rate_control=RateControl(crf=crf, preset=preset),
        )

    logger.info(
        "Quality '%s' on %s backend: %s %s",
        quality.value,
        profile.backend.value,
        profile.final_codec,
        " ".join(profile.rate_control.to_args()),
    )
    return profile
