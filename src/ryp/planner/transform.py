"""Transform planning: rotation correction, scale targets and concat geometry.

plan_transform() is a pure function of the probed properties. It decides:

1. The initial correction, from the rotation tag or, without a usable tag,
   from the frame's orientation.
2. The forced final rotation (always 90 degrees clockwise), which turns every
   body clip into the rotated "rotate your phone" format.
3. The UHD prescale, applied before any rotation.
4. The thumbnail chain, which shares only the initial correction.
5. The canvas that intro and body are normalized to before concatenation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ryp.domain import Dimensions, RotationOp, SourceVideoProperties
from ryp.planner.operations import (
    GeometricOp,
    RotateOp,
    ScaleOp,
    apply_ops,
    render_filter_chain,
)

logger = logging.getLogger(__name__)

FORCED_FINAL_ROTATION = RotationOp.ROTATE_90_CW
UHD_CONCAT_CANVAS = Dimensions(1080, 1920)
THUMBNAIL_LANDSCAPE_BOX = Dimensions(1920, 1080)

_TAG_CORRECTIONS: dict[int, RotationOp] = {
    90: RotationOp.ROTATE_90_CW,
    270: RotationOp.ROTATE_90_CCW,
    -90: RotationOp.ROTATE_90_CCW,
    180: RotationOp.ROTATE_180,
}


@dataclass(frozen=True)
class TransformPlan:
    """Immutable geometric plan for one source video."""

    source: Dimensions
    initial_correction: RotationOp | None
    forced_final_rotation: RotationOp
    pre_scale: Dimensions | None
    body_ops: tuple[GeometricOp, ...]
    thumbnail_ops: tuple[GeometricOp, ...]
    concat_canvas: Dimensions
    notes: tuple[str, ...] = ()

    @property
    def body_filter(self) -> str:
        """ffmpeg filter chain for the body (intermediate) transcode."""
        return render_filter_chain(self.body_ops)

    @property
    def thumbnail_filter(self) -> str:
        """ffmpeg filter chain applied before thumbnail crops."""
        return render_filter_chain(self.thumbnail_ops)

    @property
    def body_dimensions(self) -> Dimensions:
        """Frame dimensions of the transformed body stream."""
        return apply_ops(self.source, self.body_ops)

    @property
    def thumbnail_frame(self) -> Dimensions:
        """Frame dimensions thumbnails are cropped from."""
        return apply_ops(self.source, self.thumbnail_ops)

    @property
    def quarter_turns(self) -> int:
        """Total 90 degree turns applied to the body."""
        return total_quarter_turns(self.initial_correction, self.forced_final_rotation)


def total_quarter_turns(
    correction: RotationOp | None, forced: RotationOp = FORCED_FINAL_ROTATION
) -> int:
    """Quarter turns of the optional correction plus the forced rotation."""
    turns = forced.quarter_turns
    if correction is not None:
        turns += correction.quarter_turns
    return turns


def resolve_initial_correction(
    props: SourceVideoProperties,
) -> tuple[RotationOp | None, str | None]:
    """Decide the rotation that normalizes the source before the forced turn.

    Returns:
        Tuple of (correction or None, warning note or None).
    """
    tag = props.rotation_tag
    if tag is not None and tag != 0:
        correction = _TAG_CORRECTIONS.get(tag)
        if correction is None:
            return None, (
                f"Unsupported rotation detected ({tag} degrees). "
                "Manual adjustment may be needed."
            )
        return correction, None

    # No tag (or tag 0): a portrait frame is turned into a landscape working
    # frame so the forced rotation always starts from landscape.
    if props.height > props.width:
        return RotationOp.ROTATE_90_CW, None
    return None, None


def plan_transform(props: SourceVideoProperties, is_4k: bool) -> TransformPlan:
    """Derive the transform plan for a source video.

    Args:
        props: Probed source properties.
        is_4k: True for exact 3840x2160 / 2160x3840 sources.

    Returns:
        TransformPlan with body and thumbnail operation chains.
    """
    source = props.dimensions
    notes: list[str] = []

    correction, note = resolve_initial_correction(props)
    if note:
        notes.append(note)
        logger.warning(note)

    correction_ops: tuple[GeometricOp, ...] = ()
    if correction is not None:
        correction_ops = (RotateOp(correction),)

    # UHD sources are halved before any rotation, whatever the rotation branch.
    pre_scale: Dimensions | None = None
    body_ops: tuple[GeometricOp, ...] = ()
    if is_4k:
        pre_scale = Dimensions(source.width // 2, source.height // 2)
        body_ops += (ScaleOp(pre_scale.width, pre_scale.height),)
    body_ops += correction_ops + (RotateOp(FORCED_FINAL_ROTATION),)

    thumbnail_ops = correction_ops
    if is_4k:
        corrected = apply_ops(source, correction_ops)
        box = (
            THUMBNAIL_LANDSCAPE_BOX.swapped()
            if corrected.is_portrait
            else THUMBNAIL_LANDSCAPE_BOX
        )
        thumbnail_ops += (ScaleOp(box.width, box.height, preserve_aspect=True),)

    if is_4k:
        canvas = UHD_CONCAT_CANVAS
    elif total_quarter_turns(correction) % 2 == 1:
        canvas = source.swapped()
    else:
        canvas = source

    plan = TransformPlan(
        source=source,
        initial_correction=correction,
        forced_final_rotation=FORCED_FINAL_ROTATION,
        pre_scale=pre_scale,
        body_ops=body_ops,
        thumbnail_ops=thumbnail_ops,
        concat_canvas=canvas,
        notes=tuple(notes),
    )
    logger.debug(
        "Transform plan for %s: body=%s thumbnails=%s canvas=%s",
        source,
        plan.body_filter,
        plan.thumbnail_filter or "(none)",
        canvas,
    )
    return plan
