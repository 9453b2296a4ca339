"""Pipeline stage implementations.

Each stage declares the artifacts it needs before running, the artifacts it
must leave behind, and what must already exist for it to be skipped. The
processor checks these around every stage.
"""

from pathlib import Path
from typing import Protocol

from ryp.domain import PipelineState, StageMarker
from ryp.workflow.phases.context import RunOptions, StageContext
from ryp.workflow.phases.final_encode import FinalEncodeStage
from ryp.workflow.phases.intermediate import IntermediateStage
from ryp.workflow.phases.thumbnails import (
    CROP_X_OFFSETS,
    THUMBNAIL_PERCENTAGES,
    ThumbnailsStage,
    crop_windows,
    thumbnail_timestamps,
)


class Stage(Protocol):
    """Protocol defining the interface for pipeline stages.

    Example:
        class MyStage:
            name = "my_stage"
            state = PipelineState.THUMBNAILS
            marker = None

            def run(self, ctx: StageContext) -> None:
                ...
    """

    name: str
    state: PipelineState
    marker: StageMarker | None

    def preconditions(self, ctx: StageContext) -> list[Path]:
        """Files that must exist before the stage runs."""
        ...

    def postconditions(self, ctx: StageContext) -> list[Path]:
        """Files that must exist after the stage ran successfully."""
        ...

    def skip_requirements(self, ctx: StageContext) -> list[Path]:
        """Files that must already exist for the stage to be skipped."""
        ...

    def run(self, ctx: StageContext) -> None:
        """Run the stage.

        Raises:
            RypError: If the stage fails.
        """
        ...


__all__ = [
    "Stage",
    "RunOptions",
    "StageContext",
    "FinalEncodeStage",
    "IntermediateStage",
    "ThumbnailsStage",
    "CROP_X_OFFSETS",
    "THUMBNAIL_PERCENTAGES",
    "crop_windows",
    "thumbnail_timestamps",
]
