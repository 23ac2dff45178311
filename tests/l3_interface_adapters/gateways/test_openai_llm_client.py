"""Tests for OpenAI-compatible LLM client gateway — mocks openai here (L3 boundary)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from crazy_notes.l1_entities.errors import RequestFailedError
from crazy_notes.l3_interface_adapters.gateways.openai_llm_client import OpenAICompatLLMClient

_ASYNC_CLS = 'crazy_notes.l3_interface_adapters.gateways.openai_llm_client.openai.AsyncOpenAI'
_SYNC_CLS = 'crazy_notes.l3_interface_adapters.gateways.openai_llm_client.openai.OpenAI'


def _make_raw_response(body='{"choices": []}', content_type='application/json', status_code=200):
    """Build a mock LegacyAPIResponse wrapping an httpx response."""
    http_response = MagicMock()
    http_response.status_code = status_code
    http_response.headers = {'content-type': content_type}
    http_response.text = body
    raw = MagicMock()
    raw.http_response = http_response
    return raw


def _client_returning(mock_cls, **kwargs):
    mock_client = MagicMock()
    mock_cls.return_value = mock_client
    create = AsyncMock(**kwargs)
    mock_client.chat.completions.with_raw_response.create = create
    return create


class TestComplete:
    @pytest.mark.asyncio
    @patch(_ASYNC_CLS)
    async def test_returns_raw_reply(self, mock_cls):
        create = _client_returning(mock_cls, return_value=_make_raw_response(body='{"x": 1}'))

        reply = await OpenAICompatLLMClient(api_key='k').complete('gpt-4', 'hello')

        assert reply.status_code == 200
        assert reply.content_type == 'application/json'
        assert reply.body == '{"x": 1}'
        create.assert_awaited_once_with(model='gpt-4', messages=[{'role': 'user', 'content': 'hello'}])

    @pytest.mark.asyncio
    @patch(_ASYNC_CLS)
    async def test_html_reply_passed_through(self, mock_cls):
        _client_returning(mock_cls, return_value=_make_raw_response(body='<html/>', content_type='text/html'))
        reply = await OpenAICompatLLMClient(api_key='k').complete('gpt-4', 'hello')
        assert reply.content_type == 'text/html'

    @pytest.mark.asyncio
    @patch(_ASYNC_CLS)
    async def test_sdk_retries_disabled(self, mock_cls):
        _client_returning(mock_cls, return_value=_make_raw_response())
        await OpenAICompatLLMClient(api_key='k', base_url='http://local/v1').complete('gpt-4', 'hello')
        mock_cls.assert_called_once_with(api_key='k', base_url='http://local/v1', max_retries=0)

    @pytest.mark.asyncio
    @patch(_ASYNC_CLS)
    async def test_status_error_keeps_code(self, mock_cls):
        error = openai.InternalServerError(message='upstream down', response=MagicMock(status_code=503), body=None)
        _client_returning(mock_cls, side_effect=error)

        with pytest.raises(RequestFailedError) as exc_info:
            await OpenAICompatLLMClient(api_key='k').complete('gpt-4', 'hello')
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    @patch(_ASYNC_CLS)
    async def test_connection_error_has_no_code(self, mock_cls):
        _client_returning(mock_cls, side_effect=openai.APIConnectionError(request=MagicMock()))

        with pytest.raises(RequestFailedError) as exc_info:
            await OpenAICompatLLMClient(api_key='k').complete('gpt-4', 'hello')
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @patch(_ASYNC_CLS)
    async def test_missing_api_key(self, mock_cls):
        mock_cls.side_effect = openai.OpenAIError('The api_key client option must be set')

        with pytest.raises(RequestFailedError) as exc_info:
            await OpenAICompatLLMClient().complete('gpt-4', 'hello')
        assert exc_info.value.status_code is None


class TestCheckConnectivity:
    @patch(_SYNC_CLS)
    def test_success(self, mock_cls):
        mock_cls.return_value.models.list.return_value = []
        ok, err = OpenAICompatLLMClient(api_key='k').check_connectivity()
        assert ok
        assert not err

    @patch(_SYNC_CLS)
    def test_failure(self, mock_cls):
        mock_cls.return_value.models.list.side_effect = ConnectionError('refused')
        ok, err = OpenAICompatLLMClient(api_key='k').check_connectivity()
        assert not ok
        assert 'refused' in err
