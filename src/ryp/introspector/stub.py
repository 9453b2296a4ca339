"""Stub introspector returning canned properties, for tests and dry runs."""

from pathlib import Path

from ryp.domain import SourceVideoProperties
from ryp.exceptions import ProbeError, ProbeErrorReason


class StubIntrospector:
    """MediaIntrospector that serves pre-registered properties by file name.

    Lookups match on the file name so tests do not depend on the temporary
    directory a file lives in.
    """

    def __init__(
        self, properties: dict[str, SourceVideoProperties] | None = None
    ) -> None:
        self._properties: dict[str, SourceVideoProperties] = dict(properties or {})
        self.calls: list[Path] = []

    def register(self, name: str, props: SourceVideoProperties) -> None:
        """Register properties to return for files named ``name``."""
        self._properties[name] = props

    def get_properties(self, path: Path) -> SourceVideoProperties:
        self.calls.append(path)
        try:
            return self._properties[path.name]
        except KeyError:
            raise ProbeError(
                ProbeErrorReason.UNREADABLE, path, "no stub properties registered"
            ) from None
