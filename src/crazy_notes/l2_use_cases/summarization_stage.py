"""Use case: derive a short title and a summary from a transcript."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from crazy_notes.l1_entities.annotation import DEFAULT_TITLE_LENGTH, Annotation
from crazy_notes.l1_entities.errors import (
    MalformedResponseError,
    RequestFailedError,
    SummarizationError,
    UnexpectedContentTypeError,
)
from crazy_notes.l2_use_cases.ports.llm_client import LLMClient
from crazy_notes.l2_use_cases.utils.chat_reply import parse_chat_reply
from crazy_notes.l2_use_cases.utils.prompt_builder import build_title_prompt

log = logging.getLogger('cn.llm')


@dataclass(frozen=True)
class SummaryResult:
    """Terminal outcome of a summarization attempt.

    ``annotation`` is always set: generated content on success, a visible
    failure placeholder otherwise.
    """

    annotation: Annotation
    error: SummarizationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def failure_reason(error: SummarizationError) -> str:
    if isinstance(error, UnexpectedContentTypeError):
        return 'unexpected response'
    if isinstance(error, MalformedResponseError):
        return 'malformed response'
    if isinstance(error, RequestFailedError):
        return f'request failed ({error.status_code if error.status_code is not None else "no response"})'
    return 'request failed'


class SummarizationStage:
    """One chat-completion call per transcript. No retries."""

    def __init__(self, llm_client: LLMClient, model: str, title_length: int = DEFAULT_TITLE_LENGTH) -> None:
        self._llm = llm_client
        self._model = model
        self._title_length = title_length

    async def summarize(self, text: str) -> SummaryResult:
        prompt = build_title_prompt(text, self._title_length)
        log.info('Summary request: model=%s, transcript=%d chars', self._model, len(text))

        try:
            reply = await self._llm.complete(model=self._model, prompt=prompt)
            content = parse_chat_reply(reply)
        except UnexpectedContentTypeError as e:
            log.warning('%s (page title: %r)', e, e.page_title)
            return self._failed(e)
        except SummarizationError as e:
            log.warning('Summary failed: %s', e)
            return self._failed(e)
        except Exception as e:
            log.error('Summary request error: %s: %s', type(e).__name__, e, exc_info=True)
            return self._failed(RequestFailedError(None, str(e)))

        log.debug('LLM raw content (%d chars): %s', len(content), content[:500])
        return SummaryResult(annotation=Annotation.from_content(content, self._title_length))

    @staticmethod
    def _failed(error: SummarizationError) -> SummaryResult:
        return SummaryResult(annotation=Annotation.failed(failure_reason(error)), error=error)
