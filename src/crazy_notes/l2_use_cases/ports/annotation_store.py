"""Port: durable backing for the transcript and annotation maps."""

from __future__ import annotations

from typing import Protocol

from crazy_notes.l1_entities.annotation import Annotation
from crazy_notes.l1_entities.recording import FileId


class AnnotationStore(Protocol):
    """Two durable key-value documents. Writes replace the whole map and are durable on return."""

    def read_transcripts(self) -> dict[FileId, str]:
        ...

    def read_annotations(self) -> dict[FileId, Annotation]:
        ...

    def write_transcripts(self, transcripts: dict[FileId, str]) -> None:
        ...

    def write_annotations(self, annotations: dict[FileId, Annotation]) -> None:
        ...
