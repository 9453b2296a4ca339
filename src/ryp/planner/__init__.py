"""Transform planner: pure decision logic over probed video geometry."""

from ryp.planner.operations import (
    CropOp,
    GeometricOp,
    RotateOp,
    ScaleOp,
    apply_ops,
    render_filter_chain,
)
from ryp.planner.transform import (
    FORCED_FINAL_ROTATION,
    UHD_CONCAT_CANVAS,
    TransformPlan,
    plan_transform,
    resolve_initial_correction,
)

__all__ = [
    "CropOp",
    "GeometricOp",
    "RotateOp",
    "ScaleOp",
    "apply_ops",
    "render_filter_chain",
    "FORCED_FINAL_ROTATION",
    "UHD_CONCAT_CANVAS",
    "TransformPlan",
    "plan_transform",
    "resolve_initial_correction",
]
