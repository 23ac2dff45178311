"""AnnotationCache — keyed transcript/annotation store with placeholder reads."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from crazy_notes.l1_entities.annotation import (
    SUMMARY_PLACEHOLDER,
    TITLE_PLACEHOLDER,
    TRANSCRIPT_PLACEHOLDER,
    Annotation,
)
from crazy_notes.l1_entities.recording import FileId
from crazy_notes.l2_use_cases.ports.annotation_store import AnnotationStore

log = logging.getLogger('cn.cache')


class AnnotationCache:
    """In-memory view of two durable maps: FileId → transcript, FileId → Annotation.

    Every mutation is written through to the store before the in-memory map
    changes, so a failed write leaves memory and disk in agreement. Reads
    never block and return placeholders for absent entries.
    """

    def __init__(self, store: AnnotationStore) -> None:
        self._store = store
        self._transcripts: dict[FileId, str] = {}
        self._annotations: dict[FileId, Annotation] = {}

    def load(self) -> None:
        """Rebuild both maps from durable storage. Call before serving readers."""
        self._transcripts = dict(self._store.read_transcripts())
        self._annotations = dict(self._store.read_annotations())
        log.info('Loaded %d transcripts, %d annotations', len(self._transcripts), len(self._annotations))

    # -- writes --

    def put_transcript(self, file_id: FileId, text: str) -> None:
        updated = {**self._transcripts, file_id: text}
        self._store.write_transcripts(updated)
        self._transcripts = updated
        log.debug('Transcript stored for %s (%d chars)', file_id, len(text))

    def put_annotation(self, file_id: FileId, title: str, summary: str) -> None:
        updated = {**self._annotations, file_id: Annotation(title=title, summary=summary)}
        self._store.write_annotations(updated)
        self._annotations = updated
        log.debug('Annotation stored for %s: %r', file_id, title)

    def remove(self, file_id: FileId) -> None:
        self.prune_ids([file_id])

    def prune(self, valid_ids: Iterable[FileId]) -> list[FileId]:
        """Drop every entry whose FileId is not in *valid_ids*. Returns the dropped ids."""
        keep = set(valid_ids)
        stale = sorted((set(self._transcripts) | set(self._annotations)) - keep)
        if stale:
            self.prune_ids(stale)
            log.info('Pruned %d orphaned entries', len(stale))
        return stale

    def prune_ids(self, file_ids: Iterable[FileId]) -> None:
        drop = set(file_ids)
        if drop & self._transcripts.keys():
            transcripts = {k: v for k, v in self._transcripts.items() if k not in drop}
            self._store.write_transcripts(transcripts)
            self._transcripts = transcripts
        if drop & self._annotations.keys():
            annotations = {k: v for k, v in self._annotations.items() if k not in drop}
            self._store.write_annotations(annotations)
            self._annotations = annotations

    # -- reads --

    def has_transcript(self, file_id: FileId) -> bool:
        return file_id in self._transcripts

    def get_transcript(self, file_id: FileId) -> str:
        return self._transcripts.get(file_id, TRANSCRIPT_PLACEHOLDER)

    def get_title(self, file_id: FileId) -> str:
        annotation = self._annotations.get(file_id)
        return annotation.title if annotation is not None else TITLE_PLACEHOLDER

    def get_summary(self, file_id: FileId) -> str:
        annotation = self._annotations.get(file_id)
        return annotation.summary if annotation is not None else SUMMARY_PLACEHOLDER

    def file_ids(self) -> set[FileId]:
        return set(self._transcripts) | set(self._annotations)
