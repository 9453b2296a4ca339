"""Intermediate transcode stage.

Applies the body transform (UHD prescale, correction, forced rotation) and
writes a ProRes intermediate. The artifact can be reused by a later run
that skips this stage.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ryp.domain import PipelineState, StageMarker
from ryp.exceptions import EngineExecutionError
from ryp.executor.commands import build_intermediate_invocation
from ryp.workflow.phases.context import StageContext

logger = logging.getLogger(__name__)


class IntermediateStage:
    """Transcodes the source into the rotated ProRes intermediate."""

    name = "intermediate"
    state = PipelineState.INTERMEDIATE
    marker = StageMarker.INTERMEDIATE_DONE

    def preconditions(self, ctx: StageContext) -> list[Path]:
        return [ctx.source]

    def postconditions(self, ctx: StageContext) -> list[Path]:
        return [ctx.artifacts.intermediate]

    def skip_requirements(self, ctx: StageContext) -> list[Path]:
        """Skipping is only allowed when the artifact already exists."""
        return [ctx.artifacts.intermediate]

    def run(self, ctx: StageContext) -> None:
        output = ctx.artifacts.intermediate
        has_audio = ctx.props.has_usable_audio
        if ctx.props.has_audio and not has_audio:
            logger.info("Source audio stream is empty; dropping audio")

        invocation = build_intermediate_invocation(
            ctx.source,
            output,
            ctx.plan.body_ops,
            ctx.profile,
            has_usable_audio=has_audio,
            hwaccel=ctx.hwaccel,
            duration_seconds=ctx.props.duration_seconds,
        )
        logger.info(
            "Rotating '%s' and converting to ProRes (%s)",
            ctx.source.name,
            ctx.plan.body_filter,
        )

        result = ctx.engine.run(invocation)
        if not result.success:
            raise EngineExecutionError(
                self.name, output, result.returncode, result.stderr_text
            )

        ctx.run_state.owns_intermediate = True
        logger.info("ProRes intermediate file created: '%s'", output)
