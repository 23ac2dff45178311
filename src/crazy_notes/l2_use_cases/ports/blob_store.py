"""Port: durable storage of audio recordings."""

from __future__ import annotations

from typing import Protocol

from crazy_notes.l1_entities.recording import AudioBlob, FileId


class BlobStore(Protocol):
    """Abstract recording store keyed by FileId."""

    def save(self, data: bytes, suggested_name: str | None = None) -> AudioBlob:
        """Write audio bytes and return the stored blob. Raises StorageError."""
        ...

    def get(self, file_id: FileId) -> AudioBlob:
        """Return the blob for *file_id*. Raises NotFoundError."""
        ...

    def exists(self, file_id: FileId) -> bool:
        """True when a recording is stored under *file_id*."""
        ...

    def list(self) -> list[AudioBlob]:
        """All stored recordings, newest first."""
        ...

    def delete(self, file_id: FileId) -> None:
        """Remove the recording. Raises NotFoundError or StorageError."""
        ...
