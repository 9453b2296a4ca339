"""Mutable per-run pipeline state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ryp.domain import PipelineState, StageMarker

logger = logging.getLogger(__name__)

# Allowed forward transitions. ABORTED is reachable from every non-terminal
# state and handled separately.
_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.INIT: frozenset({PipelineState.THUMBNAILS}),
    PipelineState.THUMBNAILS: frozenset({PipelineState.INTERMEDIATE}),
    PipelineState.INTERMEDIATE: frozenset({PipelineState.FINAL_ENCODE}),
    PipelineState.FINAL_ENCODE: frozenset({PipelineState.CLEANUP}),
    PipelineState.CLEANUP: frozenset({PipelineState.DONE}),
    PipelineState.DONE: frozenset(),
    PipelineState.ABORTED: frozenset(),
}

TERMINAL_STATES = frozenset({PipelineState.DONE, PipelineState.ABORTED})


class InvalidTransitionError(RuntimeError):
    """Raised on a state transition the pipeline does not allow."""


@dataclass
class PipelineRunState:
    """State of one pipeline run.

    Attributes:
        state: Current pipeline state.
        stages_completed: Markers for stages that ran or were skipped with
            their artifact present.
        intermediate_path: Path of the intermediate artifact.
        retain_intermediate: Keep the intermediate after the final encode.
        owns_intermediate: True only if this run created the intermediate.
    """

    intermediate_path: Path
    retain_intermediate: bool = False
    state: PipelineState = PipelineState.INIT
    stages_completed: set[StageMarker] = field(default_factory=set)
    owns_intermediate: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, new_state: PipelineState) -> None:
        """Move to ``new_state``.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if new_state is PipelineState.ABORTED:
            self.abort()
            return
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Cannot move from {self.state.value} to {new_state.value}"
            )
        logger.debug("Pipeline state: %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    def abort(self) -> None:
        """Move to ABORTED from any non-terminal state."""
        if self.is_terminal:
            raise InvalidTransitionError(
                f"Cannot abort a run that is already {self.state.value}"
            )
        logger.debug("Pipeline state: %s -> aborted", self.state.value)
        self.state = PipelineState.ABORTED

    def mark(self, marker: StageMarker) -> None:
        self.stages_completed.add(marker)

    @property
    def should_delete_intermediate(self) -> bool:
        """True if cleanup may delete the intermediate artifact."""
        return self.owns_intermediate and not self.retain_intermediate
