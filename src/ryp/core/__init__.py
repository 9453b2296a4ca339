"""Core utilities shared across rotate-your-phone modules."""

from ryp.core.subprocess_utils import run_command

__all__ = ["run_command"]
