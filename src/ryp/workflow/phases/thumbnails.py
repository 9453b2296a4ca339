"""Thumbnail extraction stage.

Extracts 20 timestamps x 3 crop windows of still frames from the source.
Each extraction is an independent read of the source writing its own PNG,
so they may run on a bounded thread pool. A failed extraction is recorded
as a ThumbnailExtractionWarning and the stage carries on.
"""

from __future__ import annotations

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from ryp.domain import PipelineState, StageMarker
from ryp.exceptions import ThumbnailExtractionWarning
from ryp.executor.commands import build_thumbnail_invocation
from ryp.planner.operations import CropOp, GeometricOp
from ryp.workflow.phases.context import StageContext

logger = logging.getLogger(__name__)

THUMBNAIL_PERCENTAGES: tuple[int, ...] = tuple(range(0, 100, 5))
CROP_WIDTH = 608
CROP_HEIGHT = 1080
FRAME_WIDTH = 1920
CROP_CENTER_X = (FRAME_WIDTH - CROP_WIDTH) // 2
CROP_SIDE_SHIFT = 356
# Left, center and right window positions in the HD landscape frame.
CROP_X_OFFSETS: tuple[int, ...] = (
    CROP_CENTER_X - CROP_SIDE_SHIFT,
    CROP_CENTER_X,
    CROP_CENTER_X + CROP_SIDE_SHIFT,
)


@dataclass(frozen=True)
class ThumbnailJob:
    """One still frame to extract."""

    percent: int
    index: int
    timestamp: str
    output: Path
    ops: tuple[GeometricOp, ...]


def thumbnail_timestamps(duration_seconds: float) -> list[tuple[int, str]]:
    """Seek positions for each thumbnail percentage.

    Args:
        duration_seconds: Clip duration.

    Returns:
        List of (percent, timestamp) with timestamps formatted to
        millisecond precision and never negative.
    """
    result = []
    for percent in THUMBNAIL_PERCENTAGES:
        seconds = max(0.0, duration_seconds * percent / 100)
        result.append((percent, f"{seconds:.3f}"))
    return result


def crop_windows() -> tuple[CropOp, ...]:
    """The three crop windows, indexed 0 (left), 1 (center), 2 (right).

    The center window sits at x=656, the others 356 px either side of it.
    """
    return tuple(CropOp(CROP_WIDTH, CROP_HEIGHT, x) for x in CROP_X_OFFSETS)


class ThumbnailsStage:
    """Extracts preview stills from the source."""

    name = "thumbnails"
    state = PipelineState.THUMBNAILS
    marker = StageMarker.THUMBNAILS_DONE

    def preconditions(self, ctx: StageContext) -> list[Path]:
        return [ctx.source]

    def postconditions(self, ctx: StageContext) -> list[Path]:
        # Partial output is acceptable.
        return []

    def skip_requirements(self, ctx: StageContext) -> list[Path]:
        return []

    def plan_jobs(self, ctx: StageContext) -> list[ThumbnailJob]:
        """Build the list of extractions for this source."""
        duration = ctx.props.duration_seconds
        if duration is None:
            return []

        jobs = []
        for percent, timestamp in thumbnail_timestamps(duration):
            for index, crop in enumerate(crop_windows()):
                jobs.append(
                    ThumbnailJob(
                        percent=percent,
                        index=index,
                        timestamp=timestamp,
                        output=ctx.artifacts.thumbnail(percent, index),
                        ops=ctx.plan.thumbnail_ops + (crop,),
                    )
                )
        return jobs

    def run(self, ctx: StageContext) -> None:
        jobs = self.plan_jobs(ctx)
        workers = ctx.options.thumbnail_workers
        logger.info(
            "Generating %d thumbnails (%d worker%s)",
            len(jobs),
            workers,
            "" if workers == 1 else "s",
        )

        if workers == 1:
            outcomes = [self._extract(ctx, job) for job in jobs]
        else:
            with ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="ryp-thumb"
            ) as pool:
                futures = [
                    pool.submit(contextvars.copy_context().run, self._extract, ctx, job)
                    for job in jobs
                ]
                outcomes = [f.result() for f in futures]

        for job, warning in zip(jobs, outcomes, strict=True):
            if warning is None:
                ctx.thumbnails.append(job.output)
            else:
                ctx.warnings.append(warning)

        logger.info(
            "Thumbnails complete: %d written, %d failed",
            len(ctx.thumbnails),
            len(ctx.warnings),
        )

    def _extract(
        self, ctx: StageContext, job: ThumbnailJob
    ) -> ThumbnailExtractionWarning | None:
        invocation = build_thumbnail_invocation(
            ctx.source,
            job.output,
            job.timestamp,
            job.ops,
            hwaccel=ctx.hwaccel,
        )
        logger.debug(
            "Thumbnail at %ss (%d%%) variant %d: %s",
            job.timestamp,
            job.percent,
            job.index,
            job.output.name,
        )
        result = ctx.engine.run(invocation)
        if not result.success:
            warning = ThumbnailExtractionWarning(job.output, result.returncode)
            logger.warning("%s. Continuing...", warning)
            return warning
        return None
