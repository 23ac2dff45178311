"""Tests for AskAssistantUseCase — uses FakeLLMClient and FakeNoteWriter."""

from __future__ import annotations

from pathlib import Path

import pytest

from crazy_notes.l1_entities.errors import RequestFailedError, UnexpectedContentTypeError
from crazy_notes.l2_use_cases.assistant_use_case import AskAssistantUseCase
from crazy_notes.l2_use_cases.ports.llm_client import ChatReply
from tests.conftest import FakeLLMClient, FakeNoteWriter, json_reply


class TestAskAssistantUseCase:
    @pytest.mark.asyncio
    async def test_answer_saved_under_summary_name(self):
        llm = FakeLLMClient([json_reply('Paris is the capital of France.'), json_reply(' Capital of France \n')])
        notes = FakeNoteWriter()
        result = await AskAssistantUseCase(llm, notes, model='gpt-3.5-turbo').execute('Capital of France?')

        assert result.answer == 'Paris is the capital of France.'
        assert result.note_name == 'Capital of France'
        assert result.note_path == Path('/fake/notes/Capital of France.txt')
        assert notes.notes == {'Capital of France': 'Paris is the capital of France.'}

    @pytest.mark.asyncio
    async def test_prompts_sent(self):
        llm = FakeLLMClient([json_reply('answer'), json_reply('name')])
        await AskAssistantUseCase(llm, FakeNoteWriter(), model='m').execute('long text', summarize=True)
        assert llm.complete_calls == [
            ('m', 'Summarize: long text'),
            ('m', 'Summarize the text above in one sentence: answer'),
        ]

    @pytest.mark.asyncio
    async def test_empty_prompt_rejected(self):
        llm = FakeLLMClient()
        with pytest.raises(ValueError, match='empty'):
            await AskAssistantUseCase(llm, FakeNoteWriter(), model='m').execute('   ')
        assert llm.complete_calls == []

    @pytest.mark.asyncio
    async def test_request_failure_propagates(self):
        llm = FakeLLMClient([RequestFailedError(429)])
        notes = FakeNoteWriter()
        with pytest.raises(RequestFailedError):
            await AskAssistantUseCase(llm, notes, model='m').execute('hi')
        assert notes.notes == {}

    @pytest.mark.asyncio
    async def test_html_reply_propagates(self):
        llm = FakeLLMClient([ChatReply(200, 'text/html', '<title>Login</title>')])
        with pytest.raises(UnexpectedContentTypeError):
            await AskAssistantUseCase(llm, FakeNoteWriter(), model='m').execute('hi')
