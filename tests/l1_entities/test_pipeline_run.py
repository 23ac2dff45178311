"""Tests for PipelineRun and PipelineState."""

from __future__ import annotations

import pytest

from crazy_notes.l1_entities.pipeline_run import PipelineRun, PipelineState


class TestPipelineState:
    @pytest.mark.parametrize(
        'state',
        [PipelineState.DONE, PipelineState.TRANSCRIPT_FAILED, PipelineState.SUMMARY_FAILED],
    )
    def test_terminal_states(self, state):
        assert state.is_terminal

    @pytest.mark.parametrize(
        'state',
        [PipelineState.IDLE, PipelineState.TRANSCRIBING, PipelineState.SUMMARIZING],
    )
    def test_active_states(self, state):
        assert not state.is_terminal


class TestPipelineRun:
    def test_defaults(self):
        run = PipelineRun(file_id='a.m4a')
        assert run.state is PipelineState.IDLE
        assert not run.discarded
        assert not run.error
        assert not run.is_terminal

    def test_mutable_state(self):
        run = PipelineRun(file_id='a.m4a')
        run.state = PipelineState.DONE
        assert run.is_terminal
