"""Exit codes for the ryp command.

Every failure (bad arguments, invalid quality tier, missing file or tool,
probe failure, stage precondition or engine failure) exits 1. An
interrupted run exits 130, the conventional status for SIGINT.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for the ryp CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    INTERRUPTED = 130
