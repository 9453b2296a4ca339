"""Structured logging with JSON format support, file rotation and stage tags."""

from ryp.logging.config import configure_logging
from ryp.logging.context import (
    StageContextFilter,
    clear_stage_context,
    get_stage_context,
    set_stage_context,
    stage_context,
)
from ryp.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "StageContextFilter",
    "clear_stage_context",
    "configure_logging",
    "get_stage_context",
    "set_stage_context",
    "stage_context",
]
