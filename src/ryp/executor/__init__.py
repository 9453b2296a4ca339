"""FFmpeg engine adapter and invocation builders."""

from ryp.executor.commands import (
    build_banner_filter,
    build_final_invocation,
    build_intermediate_invocation,
    build_thumbnail_invocation,
    decode_options,
)
from ryp.executor.engine import (
    TIMEOUT_RETURNCODE,
    Engine,
    EngineResult,
    FFmpegEngine,
)
from ryp.executor.invocation import (
    EngineInput,
    EngineInvocation,
    build_command,
    format_command,
)
from ryp.executor.progress import (
    FFmpegProgress,
    ProgressReporter,
    parse_stderr_progress,
)

__all__ = [
    "build_banner_filter",
    "build_final_invocation",
    "build_intermediate_invocation",
    "build_thumbnail_invocation",
    "decode_options",
    "TIMEOUT_RETURNCODE",
    "Engine",
    "EngineResult",
    "FFmpegEngine",
    "EngineInput",
    "EngineInvocation",
    "build_command",
    "format_command",
    "FFmpegProgress",
    "ProgressReporter",
    "parse_stderr_progress",
]
