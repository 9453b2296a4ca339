"""Pipeline orchestration: run state, stages and the processor."""

from ryp.workflow.artifacts import DEFAULT_INTERMEDIATE_SUFFIX, ArtifactPaths
from ryp.workflow.phases import RunOptions, StageContext
from ryp.workflow.processor import PipelineProcessor, PipelineResult
from ryp.workflow.state import InvalidTransitionError, PipelineRunState

__all__ = [
    "DEFAULT_INTERMEDIATE_SUFFIX",
    "ArtifactPaths",
    "InvalidTransitionError",
    "PipelineProcessor",
    "PipelineResult",
    "PipelineRunState",
    "RunOptions",
    "StageContext",
]
