"""Per-file pipeline run state."""

from __future__ import annotations

import enum
import time

from pydantic import BaseModel, Field

from crazy_notes.l1_entities.recording import FileId


class PipelineState(enum.Enum):
    IDLE = 'idle'
    TRANSCRIBING = 'transcribing'
    SUMMARIZING = 'summarizing'
    DONE = 'done'
    TRANSCRIPT_FAILED = 'transcript_failed'
    SUMMARY_FAILED = 'summary_failed'

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({PipelineState.DONE, PipelineState.TRANSCRIPT_FAILED, PipelineState.SUMMARY_FAILED})


class PipelineRun(BaseModel):
    """Mutable, in-memory state of one ingestion attempt for a FileId. Never persisted."""

    file_id: FileId
    state: PipelineState = PipelineState.IDLE
    error: str = ''
    discarded: bool = False
    started_at: float = Field(default_factory=time.monotonic)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal
