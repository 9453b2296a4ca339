"""Typed access to ``RYP_*`` environment variables.

The loader reads the environment through an EnvReader so tests can hand in
a plain dict.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class EnvReader:
    """Read environment values with conversion.

    Unset and empty variables yield the caller's default. A value that
    cannot be converted is logged and also yields the default.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env

    def _raw(self, var: str) -> str | None:
        return self._env.get(var) or None

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._raw(var)
        return default if value is None else value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        value = self._raw(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Interpret 1/true/yes/on (any case) as True, anything else as False."""
        value = self._raw(var)
        if value is None:
            return default
        return value.strip().casefold() in _TRUE_VALUES

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Return the variable as a user-expanded Path.

        With ``must_exist``, a path that is not on disk is reported and
        replaced by ``default``.
        """
        value = self._raw(var)
        if value is None:
            return default
        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning("%s points to a missing path: %s", var, path)
            return default
        return path
