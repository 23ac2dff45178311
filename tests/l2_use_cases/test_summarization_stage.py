"""Tests for SummarizationStage — uses FakeLLMClient."""

from __future__ import annotations

import pytest

from crazy_notes.l1_entities.annotation import FAILED_TITLE
from crazy_notes.l1_entities.errors import (
    MalformedResponseError,
    RequestFailedError,
    UnexpectedContentTypeError,
)
from crazy_notes.l2_use_cases.ports.llm_client import ChatReply
from crazy_notes.l2_use_cases.summarization_stage import SummarizationStage
from tests.conftest import FakeLLMClient, json_reply


class TestSummarizationStage:
    @pytest.mark.asyncio
    async def test_success_builds_title_and_summary(self):
        llm = FakeLLMClient([json_reply('Greeting')])
        result = await SummarizationStage(llm, model='gpt-4', title_length=5).summarize('hello world')
        assert result.ok
        assert result.annotation.title == 'Greet'
        assert result.annotation.summary == 'Greeting'

    @pytest.mark.asyncio
    async def test_prompt_and_model(self):
        llm = FakeLLMClient([json_reply('x')])
        await SummarizationStage(llm, model='gpt-4', title_length=5).summarize('hello world')
        assert llm.complete_calls == [('gpt-4', 'Condense the following content into 5 characters: hello world')]

    @pytest.mark.asyncio
    async def test_html_reply_is_unexpected_response(self):
        html = ChatReply(200, 'text/html', '<html><head><title>Captive portal</title></head></html>')
        llm = FakeLLMClient([html])
        result = await SummarizationStage(llm, model='gpt-4').summarize('hello')
        assert isinstance(result.error, UnexpectedContentTypeError)
        assert result.error.page_title == 'Captive portal'
        assert result.annotation.title == FAILED_TITLE
        assert result.annotation.summary == 'Unable to generate summary - unexpected response'

    @pytest.mark.asyncio
    async def test_missing_content_path_is_malformed(self):
        llm = FakeLLMClient([ChatReply(200, 'application/json', '{"choices": []}')])
        result = await SummarizationStage(llm, model='gpt-4').summarize('hello')
        assert isinstance(result.error, MalformedResponseError)
        assert result.annotation.summary == 'Unable to generate summary - malformed response'

    @pytest.mark.asyncio
    async def test_request_failure_carries_status(self):
        llm = FakeLLMClient([RequestFailedError(503)])
        result = await SummarizationStage(llm, model='gpt-4').summarize('hello')
        assert result.error.status_code == 503
        assert result.annotation.summary == 'Unable to generate summary - request failed (503)'

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_request_failure(self):
        llm = FakeLLMClient([ConnectionResetError('reset')])
        result = await SummarizationStage(llm, model='gpt-4').summarize('hello')
        assert isinstance(result.error, RequestFailedError)
        assert result.error.status_code is None
        assert result.annotation.summary == 'Unable to generate summary - request failed (no response)'
