"""Recording entities: the stored audio blob and its FileId."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

FileId = str


def sanitize_file_id(name: str) -> str:
    """Turn a suggested file name into a FileId safe to use inside the recordings directory.

    Leading dots are dropped so a FileId never names a hidden or temp file.
    """
    return name.strip().replace('/', '_').replace('\\', '_').lstrip('.')


class AudioBlob(BaseModel):
    """One stored audio recording. Immutable once written."""

    model_config = {'frozen': True}

    file_id: FileId
    path: Path
    size: int = 0
    created_at: float = Field(default=0.0, description='File modification time, seconds since epoch')
