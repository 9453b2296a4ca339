"""Typed geometric filter operations.

Each operation knows how it changes frame dimensions and how it is written
as an ffmpeg filter. Filter chains are rendered from tuples of operations
rather than assembled by string concatenation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ryp.domain import Dimensions, RotationOp

# transpose=1 rotates clockwise, transpose=2 counter-clockwise.
_TRANSPOSE_FILTERS: dict[RotationOp, str] = {
    RotationOp.ROTATE_90_CW: "transpose=1",
    RotationOp.ROTATE_90_CCW: "transpose=2",
    RotationOp.ROTATE_180: "transpose=2,transpose=2",
}


@dataclass(frozen=True)
class RotateOp:
    """Rotate the frame by a multiple of 90 degrees."""

    rotation: RotationOp

    def apply(self, dims: Dimensions) -> Dimensions:
        return dims.swapped() if self.rotation.swaps_dimensions else dims

    def to_filter(self) -> str:
        return _TRANSPOSE_FILTERS[self.rotation]


@dataclass(frozen=True)
class ScaleOp:
    """Scale the frame to exact dimensions, or fit it inside a bounding box."""

    width: int
    height: int
    preserve_aspect: bool = False
    """Fit inside width x height keeping the input aspect ratio."""

    def apply(self, dims: Dimensions) -> Dimensions:
        if not self.preserve_aspect:
            return Dimensions(self.width, self.height)
        ratio = min(self.width / dims.width, self.height / dims.height)
        return Dimensions(round(dims.width * ratio), round(dims.height * ratio))

    def to_filter(self) -> str:
        if self.preserve_aspect:
            return (
                f"scale={self.width}:{self.height}"
                ":force_original_aspect_ratio=decrease"
            )
        return f"scale={self.width}:{self.height}"


@dataclass(frozen=True)
class CropOp:
    """Crop a fixed window out of the frame."""

    width: int
    height: int
    x: int
    y: int = 0

    def apply(self, dims: Dimensions) -> Dimensions:
        return Dimensions(self.width, self.height)

    def to_filter(self) -> str:
        return f"crop={self.width}:{self.height}:{self.x}:{self.y}"


GeometricOp = RotateOp | ScaleOp | CropOp


def render_filter_chain(ops: Iterable[GeometricOp]) -> str:
    """Render operations as a comma-separated ffmpeg filter chain.

    Returns:
        Filter chain string; empty when there are no operations.
    """
    return ",".join(op.to_filter() for op in ops)


def apply_ops(dims: Dimensions, ops: Iterable[GeometricOp]) -> Dimensions:
    """Compute the frame dimensions after applying ``ops`` in order."""
    for op in ops:
        dims = op.apply(dims)
    return dims
