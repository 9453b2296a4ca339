"""Shared test fixtures for rotate-your-phone."""

import shutil
import tempfile
import threading
from pathlib import Path

import pytest

from ryp.domain import FrameRate, SourceVideoProperties
from ryp.executor.engine import EngineResult
from ryp.executor.invocation import EngineInvocation
from ryp.introspector import StubIntrospector
from ryp.workflow import RunOptions


def make_props(
    width: int = 1920,
    height: int = 1080,
    frame_rate: str = "30000/1001",
    rotation_tag: int | None = None,
    duration: float | None = 30.0,
    audio_duration: float | None = 30.0,
    has_audio: bool = True,
) -> SourceVideoProperties:
    """Build SourceVideoProperties with sensible HD defaults."""
    return SourceVideoProperties(
        width=width,
        height=height,
        frame_rate=FrameRate.parse(frame_rate),
        rotation_tag=rotation_tag,
        duration_seconds=duration,
        has_audio=has_audio,
        audio_duration_seconds=audio_duration if has_audio else None,
    )


class RecordingEngine:
    """Engine fake that records invocations and writes empty outputs.

    Invocations for a stage in ``fail_stages`` (or whose output name is in
    ``fail_outputs``) return ``failure_code`` and write nothing.
    """

    def __init__(
        self,
        encoders: set[str] | None = None,
        fail_stages: tuple[str, ...] = (),
        fail_outputs: tuple[str, ...] = (),
        failure_code: int = 1,
        write_outputs: bool = True,
    ) -> None:
        self.encoders = set(encoders or ())
        self.fail_stages = set(fail_stages)
        self.fail_outputs = set(fail_outputs)
        self.failure_code = failure_code
        self.write_outputs = write_outputs
        self.invocations: list[EngineInvocation] = []
        self.list_encoders_calls = 0
        self._lock = threading.Lock()

    def list_encoders(self) -> set[str]:
        self.list_encoders_calls += 1
        return set(self.encoders)

    def run(self, invocation: EngineInvocation) -> EngineResult:
        with self._lock:
            self.invocations.append(invocation)
        if (
            invocation.stage in self.fail_stages
            or invocation.output.name in self.fail_outputs
        ):
            return EngineResult(self.failure_code, ("Conversion failed!\n",))
        if self.write_outputs:
            invocation.output.parent.mkdir(parents=True, exist_ok=True)
            invocation.output.write_bytes(b"")
        return EngineResult(0)

    def for_stage(self, stage: str) -> list[EngineInvocation]:
        return [i for i in self.invocations if i.stage == stage]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def source_video(temp_dir: Path) -> Path:
    """An (empty) source video file named clip.mov."""
    path = temp_dir / "clip.mov"
    path.touch()
    return path


@pytest.fixture
def intro_video(temp_dir: Path) -> Path:
    """An (empty) intro clip named intro.mp4."""
    path = temp_dir / "intro.mp4"
    path.touch()
    return path


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """Output directory (not created; the pipeline creates it)."""
    return temp_dir / "out"


@pytest.fixture
def stub_introspector() -> StubIntrospector:
    """Introspector with an HD landscape source, a portrait intro and the
    intermediate produced from the source."""
    introspector = StubIntrospector()
    introspector.register("clip.mov", make_props())
    introspector.register(
        "intro.mp4",
        make_props(width=1080, height=1920, duration=3.0, audio_duration=3.0),
    )
    introspector.register(
        "clip_rotated_prores.mov", make_props(width=1080, height=1920)
    )
    return introspector


@pytest.fixture
def recording_engine() -> RecordingEngine:
    """Engine fake without hardware encoders."""
    return RecordingEngine(encoders={"libx265", "prores_ks", "aac"})


@pytest.fixture
def run_options(output_dir: Path, intro_video: Path) -> RunOptions:
    """Default options writing to output_dir with the intro fixture."""
    return RunOptions(output_dir=output_dir, intro_path=intro_video)


@pytest.fixture
def props_factory():
    """Factory for SourceVideoProperties (see make_props)."""
    return make_props


@pytest.fixture
def engine_factory():
    """Factory for RecordingEngine instances."""
    return RecordingEngine
