"""Root logger setup for a ryp run."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from ryp.logging.context import StageContextFilter
from ryp.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from ryp.config.models import LoggingConfig

LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s - %(stage_tag)s%(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it cannot be created."""
    assert config.file is not None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not configured yet, so report on stderr directly.
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Records go to the log file when one is configured and can be opened,
    and to stderr when ``include_stderr`` is set or no file is in use.
    Every handler tags records with the current pipeline stage.
    """
    level = LEVELS.get(config.level.casefold(), logging.INFO)
    formatter = _build_formatter(config.format)
    stage_filter = StageContextFilter()

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(stage_filter)
        root.addHandler(handler)
