"""Use case: ask the assistant a question and keep the answer as a named note."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from crazy_notes.l2_use_cases.ports.llm_client import LLMClient
from crazy_notes.l2_use_cases.ports.note_writer import NoteWriter
from crazy_notes.l2_use_cases.utils.chat_reply import parse_chat_reply
from crazy_notes.l2_use_cases.utils.prompt_builder import build_assistant_prompt, build_one_sentence_prompt

log = logging.getLogger('cn.llm')


@dataclass(frozen=True)
class AssistantAnswer:
    answer: str
    note_name: str
    note_path: Path


class AskAssistantUseCase:
    """Stateless prompt → answer, then a one-sentence summary used as the note name."""

    def __init__(self, llm_client: LLMClient, notes: NoteWriter, model: str) -> None:
        self._llm = llm_client
        self._notes = notes
        self._model = model

    async def execute(self, prompt: str, *, summarize: bool = False) -> AssistantAnswer:
        """Raises ValueError on an empty prompt and SummarizationError on endpoint failure."""
        if not prompt.strip():
            raise ValueError('Prompt must not be empty')

        reply = await self._llm.complete(model=self._model, prompt=build_assistant_prompt(prompt, summarize=summarize))
        answer = parse_chat_reply(reply)

        name_reply = await self._llm.complete(model=self._model, prompt=build_one_sentence_prompt(answer))
        note_name = parse_chat_reply(name_reply).strip()
        log.info('Assistant answer %d chars, note name %r', len(answer), note_name)

        path = self._notes.save_note(note_name, answer)
        return AssistantAnswer(answer=answer, note_name=note_name, note_path=path)
