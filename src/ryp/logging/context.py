"""Pipeline stage context for structured logging.

A contextvar holds the stage currently running so every record emitted
while it runs, including records from thumbnail worker threads started
with a copied context, can be tagged with it.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)
_source_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source_path", default=None
)


def set_stage_context(stage: str, source_path: Path | str | None = None) -> None:
    """Set the current stage context.

    Args:
        stage: Stage name (e.g., "intermediate").
        source_path: Source video being processed, or None.
    """
    _stage.set(stage)
    _source_path.set(str(source_path) if source_path is not None else None)


def clear_stage_context() -> None:
    """Clear the current stage context."""
    _stage.set(None)
    _source_path.set(None)


@contextmanager
def stage_context(
    stage: str,
    source_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager for a pipeline stage.

    Sets the stage context on entry and restores the previous one on exit.

    Example:
        with stage_context("thumbnails", "/videos/clip.mov"):
            logger.info("Generating thumbnails")  # tagged [thumbnails]
    """
    old_stage = _stage.get()
    old_source = _source_path.get()
    try:
        set_stage_context(stage, source_path)
        yield
    finally:
        _stage.set(old_stage)
        _source_path.set(old_source)


def get_stage_context() -> tuple[str | None, str | None]:
    """Get current stage context.

    Returns:
        Tuple of (stage, source_path), either may be None.
    """
    return _stage.get(), _source_path.get()


class StageContextFilter(logging.Filter):
    """Logging filter that injects the stage context into log records.

    Adds stage and source_path attributes, and a stage_tag such as
    "[intermediate] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject stage context into the log record.

        Returns:
            Always True (does not filter, only enriches).
        """
        stage, source_path = get_stage_context()
        record.stage = stage
        record.source_path = source_path
        record.stage_tag = f"[{stage}] " if stage else ""
        return True
