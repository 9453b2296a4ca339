"""Final encode stage.

Encodes the intermediate to 10-bit HEVC, optionally concatenated after the
intro clip. Audio mapping depends on whether the intermediate actually
carries usable audio, which is re-checked here rather than trusted from the
source, since a reused intermediate may differ.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ryp.domain import PipelineState
from ryp.exceptions import EngineExecutionError, ProbeError, ProbeErrorReason
from ryp.executor.commands import build_final_invocation
from ryp.workflow.phases.context import StageContext

logger = logging.getLogger(__name__)


class FinalEncodeStage:
    """Produces the delivery file."""

    name = "final_encode"
    state = PipelineState.FINAL_ENCODE
    marker = None

    def preconditions(self, ctx: StageContext) -> list[Path]:
        paths = [ctx.artifacts.intermediate]
        if ctx.options.intro_path is not None and not ctx.options.skip_banner:
            paths.append(ctx.options.intro_path)
        return paths

    def postconditions(self, ctx: StageContext) -> list[Path]:
        return [ctx.artifacts.final]

    def skip_requirements(self, ctx: StageContext) -> list[Path]:
        return []

    def body_has_audio(self, ctx: StageContext) -> bool:
        """Whether the intermediate carries usable audio."""
        intermediate = ctx.artifacts.intermediate
        if ctx.dry_run and not intermediate.exists():
            return ctx.props.has_usable_audio
        return ctx.introspector.get_properties(intermediate).has_usable_audio

    def expected_duration(self, ctx: StageContext) -> float | None:
        duration = ctx.props.duration_seconds
        if duration is None:
            return None
        if self._use_banner(ctx) and ctx.intro_props is not None:
            intro_duration = ctx.intro_props.duration_seconds
            if intro_duration is None:
                return None
            return duration + intro_duration
        return duration

    def _use_banner(self, ctx: StageContext) -> bool:
        return not ctx.options.skip_banner and ctx.options.intro_path is not None

    def run(self, ctx: StageContext) -> None:
        output = ctx.artifacts.final
        body_has_audio = self.body_has_audio(ctx)

        if self._use_banner(ctx):
            intro_props = ctx.intro_props
            logger.info(
                "Concatenating intro and encoding to HEVC 10-bit (canvas %s)",
                ctx.plan.concat_canvas,
            )
            intro = ctx.options.intro_path
            assert intro is not None
            try:
                invocation = build_final_invocation(
                    ctx.artifacts.intermediate,
                    output,
                    ctx.profile,
                    ctx.props.frame_rate,
                    body_has_audio=body_has_audio,
                    intro=intro,
                    intro_has_audio=bool(intro_props and intro_props.has_usable_audio),
                    intro_duration=(
                        intro_props.duration_seconds if intro_props else None
                    ),
                    canvas=ctx.plan.concat_canvas,
                    hwaccel=ctx.hwaccel,
                    duration_seconds=self.expected_duration(ctx),
                )
            except ValueError as e:
                # A reused intermediate can carry audio the source lacked.
                raise ProbeError(
                    ProbeErrorReason.MISSING_DURATION, intro, str(e)
                ) from e
        else:
            logger.info("Encoding to HEVC 10-bit without intro")
            # A 4K body that did not end up portrait is fitted to the canvas.
            canvas = None
            if ctx.plan.body_dimensions != ctx.plan.concat_canvas:
                canvas = ctx.plan.concat_canvas
            invocation = build_final_invocation(
                ctx.artifacts.intermediate,
                output,
                ctx.profile,
                ctx.props.frame_rate,
                body_has_audio=body_has_audio,
                canvas=canvas,
                hwaccel=ctx.hwaccel,
                duration_seconds=self.expected_duration(ctx),
            )

        result = ctx.engine.run(invocation)
        if not result.success:
            raise EngineExecutionError(
                self.name, output, result.returncode, result.stderr_text
            )
        logger.info("Final HEVC 10-bit file created: '%s'", output)
