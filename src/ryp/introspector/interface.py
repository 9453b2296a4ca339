"""MediaIntrospector interface for video metadata extraction."""

from pathlib import Path
from typing import Protocol

from ryp.domain import SourceVideoProperties


class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations.

    The pipeline only needs the geometry, frame rate, rotation, duration and
    audio presence of a file; implementations can use ffprobe or return
    canned values in tests.
    """

    def get_properties(self, path: Path) -> SourceVideoProperties:
        """Extract video properties from a media file.

        Args:
            path: Path to the media file.

        Returns:
            SourceVideoProperties for the file's first video stream.

        Raises:
            ProbeError: If the metadata cannot be read.
        """
        ...
