"""Pipeline processor.

Runs one source through the stage state machine:

    INIT -> THUMBNAILS -> INTERMEDIATE -> FINAL_ENCODE -> CLEANUP -> DONE

with ABORTED reachable from any state. INIT validates every input and
derives the plan before any output is written. A failing stage aborts the
run without cleaning up partial output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ryp.domain import PipelineState, SourceVideoProperties
from ryp.exceptions import (
    EngineExecutionError,
    MissingInputError,
    MissingIntermediateArtifact,
    ProbeError,
    ProbeErrorReason,
    StagePreconditionError,
    ThumbnailExtractionWarning,
    ValidationError,
)
from ryp.executor.engine import Engine
from ryp.introspector.interface import MediaIntrospector
from ryp.logging import stage_context
from ryp.planner import plan_transform
from ryp.tools.detection import HARDWARE_ENCODERS, detect_hardware_backend
from ryp.tools.encoders import parse_quality_tier, select_quality_profile
from ryp.workflow.artifacts import ArtifactPaths
from ryp.workflow.phases import (
    FinalEncodeStage,
    IntermediateStage,
    RunOptions,
    Stage,
    StageContext,
    ThumbnailsStage,
)
from ryp.workflow.state import PipelineRunState

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of a completed run."""

    source: Path
    state: PipelineState
    final_output: Path | None
    intermediate_path: Path
    intermediate_kept: bool
    thumbnails: list[Path] = field(default_factory=list)
    warnings: list[ThumbnailExtractionWarning] = field(default_factory=list)
    notes: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.state is PipelineState.DONE


class PipelineProcessor:
    """Orchestrates the stages for one source video."""

    def __init__(
        self,
        engine: Engine,
        introspector: MediaIntrospector,
        hardware_encoders: tuple[str, ...] = HARDWARE_ENCODERS,
    ) -> None:
        """Initialize the processor.

        Args:
            engine: Engine that executes ffmpeg invocations.
            introspector: Metadata prober for source, intro and intermediate.
            hardware_encoders: Encoders required for the hardware backend.
        """
        self.engine = engine
        self.introspector = introspector
        self.hardware_encoders = hardware_encoders
        self.stages: tuple[Stage, ...] = (
            ThumbnailsStage(),
            IntermediateStage(),
            FinalEncodeStage(),
        )
        self.run_state: PipelineRunState | None = None

    def run(self, source: Path, options: RunOptions) -> PipelineResult:
        """Process a source video.

        Args:
            source: Input video file.
            options: Merged run options.

        Returns:
            PipelineResult for a run that reached DONE.

        Raises:
            RypError: On any fatal failure; the run state is ABORTED.
            KeyboardInterrupt: If interrupted; the run state is ABORTED.
        """
        # The tier is validated before anything else, including file checks.
        tier = parse_quality_tier(options.quality)
        artifacts = ArtifactPaths.for_source(
            source, options.output_dir, tier, options.intermediate_suffix
        )
        state = PipelineRunState(
            intermediate_path=artifacts.intermediate,
            retain_intermediate=options.keep_intermediate,
        )
        self.run_state = state

        try:
            with stage_context("init", source):
                ctx = self._initialize(source, options, artifacts, state)

            if not options.dry_run:
                options.output_dir.mkdir(parents=True, exist_ok=True)

            for stage in self.stages:
                state.advance(stage.state)
                with stage_context(stage.name, source):
                    self._run_stage(stage, ctx)

            state.advance(PipelineState.CLEANUP)
            with stage_context("cleanup", source):
                self._cleanup(ctx)
            state.advance(PipelineState.DONE)
        except BaseException:
            if not state.is_terminal:
                failed_in = state.state.value
                state.abort()
                logger.error("Pipeline aborted during %s stage", failed_in)
            raise

        logger.info("Pipeline finished for '%s'", source.name)
        return PipelineResult(
            source=source,
            state=state.state,
            final_output=artifacts.final,
            intermediate_path=artifacts.intermediate,
            intermediate_kept=artifacts.intermediate.exists(),
            thumbnails=list(ctx.thumbnails),
            warnings=list(ctx.warnings),
            notes=ctx.plan.notes,
        )

    def _initialize(
        self,
        source: Path,
        options: RunOptions,
        artifacts: ArtifactPaths,
        state: PipelineRunState,
    ) -> StageContext:
        """INIT: validate inputs, probe, plan and select encoders."""
        if not source.is_file():
            raise MissingInputError("Input file", source)

        use_banner = not options.skip_banner
        if use_banner:
            if options.intro_path is None:
                raise ValidationError(
                    "No intro video configured. Use --intro or --skip-banner."
                )
            if not options.intro_path.is_file():
                raise MissingInputError("Intro video", options.intro_path)

        props = self.introspector.get_properties(source)
        logger.info(
            "Source %s, %s fps, rotation %s, audio %s",
            props.dimensions,
            props.frame_rate,
            props.rotation_tag if props.rotation_tag is not None else "none",
            "yes" if props.has_usable_audio else "no",
        )
        if not options.skip_thumbnails and props.duration_seconds is None:
            raise ProbeError(ProbeErrorReason.MISSING_DURATION, source)

        intro_props: SourceVideoProperties | None = None
        if use_banner and options.intro_path is not None:
            intro_props = self.introspector.get_properties(options.intro_path)
            intro_duration = intro_props.duration_seconds
            if (
                props.has_usable_audio
                and not intro_props.has_usable_audio
                and (intro_duration is None or intro_duration <= 0)
            ):
                raise ProbeError(
                    ProbeErrorReason.MISSING_DURATION,
                    options.intro_path,
                    "needed to pad the silent intro",
                )

        plan = plan_transform(props, props.is_4k)
        if props.is_4k:
            logger.info("4K source detected; scaling down to HD")

        hardware = detect_hardware_backend(
            self.engine, options.disable_hwaccel, self.hardware_encoders
        )
        profile = select_quality_profile(hardware, artifacts.quality)

        ctx = StageContext(
            source=source,
            options=options,
            props=props,
            plan=plan,
            profile=profile,
            artifacts=artifacts,
            run_state=state,
            engine=self.engine,
            introspector=self.introspector,
            intro_props=intro_props,
        )

        for stage in self.stages:
            if self._is_skipped(stage, options):
                self._check_skip_requirements(stage, ctx)
        return ctx

    @staticmethod
    def _is_skipped(stage: Stage, options: RunOptions) -> bool:
        if isinstance(stage, ThumbnailsStage):
            return options.skip_thumbnails
        if isinstance(stage, IntermediateStage):
            return options.skip_rotation
        return False

    def _check_skip_requirements(self, stage: Stage, ctx: StageContext) -> None:
        for path in stage.skip_requirements(ctx):
            if path.exists():
                continue
            if isinstance(stage, IntermediateStage):
                raise MissingIntermediateArtifact(path)
            raise StagePreconditionError(
                stage.name,
                path,
                f"Cannot skip {stage.name} stage: required artifact '{path}' "
                "not found.",
            )

    def _run_stage(self, stage: Stage, ctx: StageContext) -> None:
        state = ctx.run_state
        if self._is_skipped(stage, ctx.options):
            self._check_skip_requirements(stage, ctx)
            logger.info("Skipping %s stage as requested", stage.name)
            if stage.marker is not None:
                state.mark(stage.marker)
            return

        if not ctx.dry_run:
            for path in stage.preconditions(ctx):
                if not path.exists():
                    raise StagePreconditionError(stage.name, path)

        stage.run(ctx)

        if not ctx.dry_run:
            for path in stage.postconditions(ctx):
                if not path.exists():
                    raise EngineExecutionError(
                        stage.name, path, 0, "engine exited 0 but wrote no output"
                    )
        if stage.marker is not None:
            state.mark(stage.marker)

    def _cleanup(self, ctx: StageContext) -> None:
        """CLEANUP: delete the intermediate only if this run created it."""
        state = ctx.run_state
        intermediate = state.intermediate_path

        if not state.should_delete_intermediate:
            if state.retain_intermediate:
                logger.info(
                    "Intermediate ProRes file retained as requested: '%s'",
                    intermediate,
                )
            else:
                logger.info(
                    "Intermediate ProRes file retained; it was not created "
                    "in this run: '%s'",
                    intermediate,
                )
            return

        if ctx.dry_run:
            logger.info("Dry run, would delete intermediate: '%s'", intermediate)
            return

        logger.info("Cleaning up intermediate file: '%s'", intermediate)
        intermediate.unlink(missing_ok=True)
