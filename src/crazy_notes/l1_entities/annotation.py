"""Annotation entity and the placeholders readers see while it is absent."""

from __future__ import annotations

from pydantic import BaseModel

TRANSCRIPT_PLACEHOLDER = 'no transcript available'
TITLE_PLACEHOLDER = 'generating title...'
SUMMARY_PLACEHOLDER = 'generating summary...'

FAILED_TITLE = 'Error'
EMPTY_TITLE = 'Untitled'
EMPTY_SUMMARY = 'No speech detected'

DEFAULT_TITLE_LENGTH = 5


class Annotation(BaseModel):
    """Title and summary derived from a transcript."""

    model_config = {'frozen': True}

    title: str
    summary: str

    @classmethod
    def from_content(cls, content: str, title_length: int = DEFAULT_TITLE_LENGTH) -> Annotation:
        """Short title from the first *title_length* characters; the full content is the summary."""
        return cls(title=content.strip()[:title_length], summary=content)

    @classmethod
    def failed(cls, reason: str) -> Annotation:
        return cls(title=FAILED_TITLE, summary=f'Unable to generate summary - {reason}')

    @classmethod
    def empty(cls) -> Annotation:
        return cls(title=EMPTY_TITLE, summary=EMPTY_SUMMARY)


def transcript_preview(text: str, length: int = 15) -> str:
    """Leading slice of a transcript for list rows."""
    return f'{text[:length]}...'
