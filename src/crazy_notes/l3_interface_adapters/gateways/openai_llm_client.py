"""Gateway: OpenAI-compatible chat-completion client — implements LLMClient port.

Works with any OpenAI-compatible API: OpenAI, Gemini, Groq, Together, vLLM, etc.
"""

from __future__ import annotations

import logging

import openai

from crazy_notes.l1_entities.errors import RequestFailedError
from crazy_notes.l2_use_cases.ports.llm_client import ChatReply

log = logging.getLogger('cn.llm')


class OpenAICompatLLMClient:
    """Wraps openai.AsyncOpenAI, returning the raw reply so content type can be inspected.

    The SDK's automatic retries are disabled: a failed call is terminal and
    re-triggering is the caller's decision.
    """

    def __init__(self, api_key: str | None = None, base_url: str = 'https://api.openai.com/v1') -> None:
        self._api_key = api_key
        self._base_url = base_url

    async def complete(self, model: str, prompt: str) -> ChatReply:
        try:
            client = openai.AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, max_retries=0)
            raw = await client.chat.completions.with_raw_response.create(
                model=model,
                messages=[{'role': 'user', 'content': prompt}],
            )
        except openai.APIStatusError as e:
            log.warning('HTTP error code: %s', e.status_code)
            raise RequestFailedError(e.status_code, e.message) from e
        except openai.APIConnectionError as e:
            raise RequestFailedError(None, str(e)) from e
        except openai.OpenAIError as e:
            raise RequestFailedError(None, str(e)) from e

        http_response = raw.http_response
        return ChatReply(
            status_code=http_response.status_code,
            content_type=http_response.headers.get('content-type', ''),
            body=http_response.text,
        )

    def check_connectivity(self) -> tuple[bool, str]:
        try:
            client = openai.OpenAI(api_key=self._api_key, base_url=self._base_url, max_retries=0)
            client.models.list()
            return True, ''
        except openai.AuthenticationError as e:
            return False, f'Authentication failed: {e}'
        except Exception as e:
            return False, f'Cannot connect to OpenAI-compatible API: {e}'
