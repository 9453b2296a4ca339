"""Introspector module for rotate-your-phone.

- MediaIntrospector: Protocol defining the introspection interface
- FFprobeIntrospector: Production implementation using ffprobe
- StubIntrospector: Stub implementation for testing
- parse_ffprobe_output: Pure ffprobe JSON parser
"""

from ryp.introspector.ffprobe import FFprobeIntrospector
from ryp.introspector.interface import MediaIntrospector
from ryp.introspector.parsers import parse_ffprobe_output
from ryp.introspector.stub import StubIntrospector

__all__ = [
    "MediaIntrospector",
    "FFprobeIntrospector",
    "StubIntrospector",
    "parse_ffprobe_output",
]
