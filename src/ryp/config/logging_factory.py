"""Apply ``--log-*`` command-line overrides to the loaded logging config."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from ryp.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return a copy of ``base`` with every non-None override applied.

    The copy is validated again, so an invalid override raises ValueError.
    """
    overrides = {
        "level": level,
        "file": file,
        "format": format,
        "include_stderr": include_stderr,
    }
    return dataclasses.replace(
        base, **{key: value for key, value in overrides.items() if value is not None}
    )
