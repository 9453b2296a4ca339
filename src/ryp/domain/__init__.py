"""Domain models and enums for rotate-your-phone.

Usage:
    from ryp.domain import SourceVideoProperties, FrameRate, Dimensions
    from ryp.domain import RotationOp, QualityTier
"""

from .enums import (
    Backend,
    PipelineState,
    PixelFormat,
    QualityTier,
    RotationOp,
    StageMarker,
)
from .models import (
    UHD_DIMENSIONS,
    Dimensions,
    FrameRate,
    SourceVideoProperties,
)

__all__ = [
    # Models
    "Dimensions",
    "FrameRate",
    "SourceVideoProperties",
    "UHD_DIMENSIONS",
    # Enums
    "Backend",
    "PipelineState",
    "PixelFormat",
    "QualityTier",
    "RotationOp",
    "StageMarker",
]
