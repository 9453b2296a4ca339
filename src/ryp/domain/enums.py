"""Domain enums for rotate-your-phone.

This module contains the enums shared by the planner, the quality selector
and the pipeline processor.
"""

from enum import Enum


class RotationOp(Enum):
    """A rotation by a multiple of 90 degrees."""

    ROTATE_90_CW = "rotate_90_cw"
    ROTATE_90_CCW = "rotate_90_ccw"
    ROTATE_180 = "rotate_180"

    @property
    def quarter_turns(self) -> int:
        """Number of 90 degree turns this rotation performs."""
        return 2 if self is RotationOp.ROTATE_180 else 1

    @property
    def swaps_dimensions(self) -> bool:
        """True if the rotation exchanges width and height."""
        return self.quarter_turns % 2 == 1


class QualityTier(Enum):
    """Named quality presets for the final encode."""

    FAST = "fast"
    MEDIUM = "medium"
    HIGH = "high"
    BEST = "best"


class Backend(Enum):
    """Encoder backend family."""

    HARDWARE = "hardware"
    SOFTWARE = "software"


class PixelFormat(Enum):
    """10-bit pixel formats used for the final HEVC encode."""

    YUV420P10LE = "yuv420p10le"  # Planar, software encoders
    P010LE = "p010le"  # Packed/semi-planar, hardware encoders


class PipelineState(Enum):
    """States of the pipeline processor."""

    INIT = "init"
    THUMBNAILS = "thumbnails"
    INTERMEDIATE = "intermediate"
    FINAL_ENCODE = "final_encode"
    CLEANUP = "cleanup"
    DONE = "done"
    ABORTED = "aborted"


class StageMarker(Enum):
    """Markers recorded as stages complete or are skipped."""

    THUMBNAILS_DONE = "thumbnails_done"
    INTERMEDIATE_DONE = "intermediate_done"
