"""Run options and the context shared by pipeline stages.

RunOptions is what the caller asks for (already merged from CLI, profile,
environment and config file). StageContext is what INIT derived from it:
probed properties, the transform plan, the quality profile and artifact
paths. Stages read the context and record their outcomes on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ryp.domain import SourceVideoProperties
from ryp.exceptions import ThumbnailExtractionWarning
from ryp.executor.engine import Engine
from ryp.introspector.interface import MediaIntrospector
from ryp.planner import TransformPlan
from ryp.tools.encoders import QualityProfile
from ryp.workflow.artifacts import DEFAULT_INTERMEDIATE_SUFFIX, ArtifactPaths
from ryp.workflow.state import PipelineRunState


@dataclass(frozen=True)
class RunOptions:
    """Options for one pipeline run."""

    quality: str = "best"
    output_dir: Path = Path(".")
    intro_path: Path | None = None
    skip_thumbnails: bool = False
    skip_rotation: bool = False
    skip_banner: bool = False
    keep_intermediate: bool = False
    disable_hwaccel: bool = False
    dry_run: bool = False
    thumbnail_workers: int = 1
    intermediate_suffix: str = DEFAULT_INTERMEDIATE_SUFFIX

    def __post_init__(self) -> None:
        if self.thumbnail_workers < 1:
            raise ValueError(
                f"thumbnail_workers must be at least 1, got {self.thumbnail_workers}"
            )
        if not self.intermediate_suffix:
            raise ValueError("intermediate_suffix must not be empty")


@dataclass
class StageContext:
    """Everything a stage needs to run against one source file."""

    source: Path
    options: RunOptions
    props: SourceVideoProperties
    plan: TransformPlan
    profile: QualityProfile
    artifacts: ArtifactPaths
    run_state: PipelineRunState
    engine: Engine
    introspector: MediaIntrospector
    intro_props: SourceVideoProperties | None = None
    thumbnails: list[Path] = field(default_factory=list)
    warnings: list[ThumbnailExtractionWarning] = field(default_factory=list)

    @property
    def hwaccel(self) -> bool:
        return not self.options.disable_hwaccel

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run
