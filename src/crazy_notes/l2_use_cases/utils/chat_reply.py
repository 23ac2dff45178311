"""Interpretation of raw chat-completion replies."""

from __future__ import annotations

import json
import re

from crazy_notes.l1_entities.errors import MalformedResponseError, UnexpectedContentTypeError
from crazy_notes.l2_use_cases.ports.llm_client import ChatReply

_TITLE_RE = re.compile(r'<title>(.*?)</title>', re.IGNORECASE | re.DOTALL)


def is_json_content_type(content_type: str) -> bool:
    """Match application/json and +json media types, ignoring parameters such as charset."""
    media_type = content_type.split(';', 1)[0].strip().lower()
    return media_type == 'application/json' or media_type.endswith('+json')


def extract_page_title(body: str) -> str:
    match = _TITLE_RE.search(body)
    return match.group(1).strip() if match else ''


def parse_chat_reply(reply: ChatReply) -> str:
    """Return choices[0].message.content from *reply*.

    Raises:
        UnexpectedContentTypeError: the body is not JSON (e.g. a proxy's HTML page).
        MalformedResponseError: the body is JSON but lacks the expected path.
    """
    if not is_json_content_type(reply.content_type):
        raise UnexpectedContentTypeError(reply.content_type, page_title=extract_page_title(reply.body))

    try:
        payload = json.loads(reply.body)
    except ValueError as e:
        raise MalformedResponseError(f'Reply body is not valid JSON: {e}') from e

    try:
        content = payload['choices'][0]['message']['content']
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError("Reply lacks 'choices[0].message.content'") from e

    if not isinstance(content, str):
        raise MalformedResponseError(f'Expected string content, got {type(content).__name__}')
    return content
