"""Unit tests for PipelineRunState."""

from pathlib import Path

import pytest

from ryp.domain import PipelineState, StageMarker
from ryp.workflow.state import InvalidTransitionError, PipelineRunState

ORDER = [
    PipelineState.THUMBNAILS,
    PipelineState.INTERMEDIATE,
    PipelineState.FINAL_ENCODE,
    PipelineState.CLEANUP,
    PipelineState.DONE,
]


def _state(**kwargs) -> PipelineRunState:
    return PipelineRunState(intermediate_path=Path("x_rotated_prores.mov"), **kwargs)


class TestTransitions:
    """Tests for state transitions."""

    def test_full_sequence(self):
        state = _state()
        for next_state in ORDER:
            state.advance(next_state)
        assert state.state is PipelineState.DONE
        assert state.is_terminal

    def test_cannot_skip_states(self):
        state = _state()
        with pytest.raises(InvalidTransitionError):
            state.advance(PipelineState.FINAL_ENCODE)

    @pytest.mark.parametrize("stop_after", range(len(ORDER) - 1))
    def test_abort_from_any_non_terminal_state(self, stop_after):
        state = _state()
        for next_state in ORDER[:stop_after]:
            state.advance(next_state)
        state.advance(PipelineState.ABORTED)
        assert state.state is PipelineState.ABORTED

    def test_terminal_states_are_final(self):
        state = _state()
        state.abort()
        with pytest.raises(InvalidTransitionError):
            state.abort()
        with pytest.raises(InvalidTransitionError):
            state.advance(PipelineState.THUMBNAILS)


class TestIntermediateOwnership:
    """Tests for the intermediate deletion rule."""

    def test_borrowed_intermediate_is_kept(self):
        assert not _state().should_delete_intermediate

    def test_owned_intermediate_is_deleted(self):
        state = _state()
        state.owns_intermediate = True
        assert state.should_delete_intermediate

    def test_retained_intermediate_is_kept(self):
        state = _state(retain_intermediate=True)
        state.owns_intermediate = True
        assert not state.should_delete_intermediate

    def test_markers(self):
        state = _state()
        state.mark(StageMarker.THUMBNAILS_DONE)
        state.mark(StageMarker.THUMBNAILS_DONE)
        assert state.stages_completed == {StageMarker.THUMBNAILS_DONE}
