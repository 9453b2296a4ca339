"""Output artifact naming.

All artifacts are written to one output directory and named after the
source file's stem.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ryp.domain import QualityTier

DEFAULT_INTERMEDIATE_SUFFIX = "_rotated_prores.mov"


@dataclass(frozen=True)
class ArtifactPaths:
    """Paths of every file a run can produce for one source."""

    output_dir: Path
    base: str
    quality: QualityTier
    intermediate_suffix: str = DEFAULT_INTERMEDIATE_SUFFIX

    @classmethod
    def for_source(
        cls,
        source: Path,
        output_dir: Path,
        quality: QualityTier,
        intermediate_suffix: str = DEFAULT_INTERMEDIATE_SUFFIX,
    ) -> ArtifactPaths:
        return cls(output_dir, source.stem, quality, intermediate_suffix)

    @property
    def intermediate(self) -> Path:
        return self.output_dir / f"{self.base}{self.intermediate_suffix}"

    @property
    def final(self) -> Path:
        return self.output_dir / f"{self.base}-RotateYourPhone-{self.quality.value}.mp4"

    def thumbnail(self, percent: int, index: int) -> Path:
        """Path of the ``index``-th crop variant at ``percent`` of the clip."""
        return self.output_dir / f"{self.base}-Thumb-{percent}p-{index}.png"
