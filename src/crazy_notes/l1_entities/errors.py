"""Domain error types."""

from __future__ import annotations


class StorageError(Exception):
    """Raised when a recording or annotation cannot be written or removed."""


class NotFoundError(Exception):
    """Raised when a FileId has no stored recording."""

    def __init__(self, file_id: str) -> None:
        super().__init__(f'Recording not found: {file_id}')
        self.file_id = file_id


class PlaybackError(Exception):
    """Raised when a recording cannot be decoded or played."""


class ModelResolutionError(Exception):
    """Raised when a whisper model cannot be resolved to a local path."""


class StageError(Exception):
    """Base for failures that end one pipeline stage attempt."""


class UnauthorizedError(StageError):
    """Speech recognition has not been granted to this process."""


class RecognitionError(StageError):
    """The recognition engine failed or produced no final result."""


class SummarizationError(StageError):
    """Base for text-generation endpoint failures."""


class RequestFailedError(SummarizationError):
    """Transport error or non-2xx status from the text-generation endpoint."""

    def __init__(self, status_code: int | None, detail: str = '') -> None:
        code = status_code if status_code is not None else 'no response'
        message = f'Request failed ({code})'
        if detail:
            message = f'{message}: {detail}'
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(SummarizationError):
    """JSON reply without the choices[0].message.content path."""


class UnexpectedContentTypeError(SummarizationError):
    """Successful reply whose body is not JSON (typically an HTML page)."""

    def __init__(self, content_type: str, page_title: str = '') -> None:
        super().__init__(f'Unexpected content type: {content_type or "(none)"}')
        self.content_type = content_type
        self.page_title = page_title
