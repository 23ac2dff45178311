"""LibraryController — orchestrates the recording library for the CLI."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from crazy_notes.l1_entities.annotation import transcript_preview
from crazy_notes.l1_entities.errors import NotFoundError
from crazy_notes.l1_entities.pipeline_run import PipelineState
from crazy_notes.l1_entities.recording import AudioBlob, FileId
from crazy_notes.l2_use_cases.annotation_cache import AnnotationCache
from crazy_notes.l2_use_cases.ingestion_pipeline import IngestionPipeline
from crazy_notes.l2_use_cases.playback_session import PlaybackSession
from crazy_notes.l2_use_cases.ports.blob_store import BlobStore
from crazy_notes.l2_use_cases.ports.speech_recognizer import AuthorizationStatus
from crazy_notes.l2_use_cases.transcription_stage import TranscriptionStage

log = logging.getLogger('cn.controller')


@dataclass(frozen=True)
class LibraryEntry:
    """Read model for one recording: what a list row or detail view shows."""

    file_id: FileId
    title: str
    summary: str
    transcript: str
    preview: str
    state: PipelineState | None
    error: str = ''


class LibraryController:
    """Front door for producers (recorder, companion device) and readers.

    Owns startup ordering: the cache is loaded and repaired before any
    reader query, and recognition is authorized once.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        cache: AnnotationCache,
        pipeline: IngestionPipeline,
        playback: PlaybackSession,
        transcription: TranscriptionStage,
    ) -> None:
        self._blob_store = blob_store
        self._cache = cache
        self._pipeline = pipeline
        self._playback = playback
        self._transcription = transcription
        self.authorization = AuthorizationStatus.NOT_DETERMINED

    def load(self) -> list[FileId]:
        """Reload durable annotations and drop entries whose recording is gone."""
        self._cache.load()
        return self._cache.prune(blob.file_id for blob in self._blob_store.list())

    async def authorize(self) -> AuthorizationStatus:
        self.authorization = await asyncio.to_thread(self._transcription.authorize)
        return self.authorization

    # -- producers --

    def receive(self, data: bytes, suggested_name: str | None = None) -> AudioBlob:
        """A new recording arrived: store it and start its pipeline. Must run on the event loop."""
        blob = self._blob_store.save(data, suggested_name)
        self._pipeline.start(blob)
        return blob

    def retry(self, file_ids: list[FileId] | None = None) -> list[FileId]:
        """Re-trigger pipelines for *file_ids*, or for every recording still lacking a transcript."""
        if file_ids:
            blobs = [self._blob_store.get(fid) for fid in file_ids]
        else:
            blobs = [b for b in self._blob_store.list() if not self._cache.has_transcript(b.file_id)]
        return [blob.file_id for blob in blobs if self._pipeline.start(blob)]

    async def wait_idle(self) -> None:
        await self._pipeline.join()

    # -- readers --

    def entries(self) -> list[LibraryEntry]:
        return [self._entry(blob.file_id) for blob in self._blob_store.list()]

    def detail(self, file_id: FileId) -> LibraryEntry:
        if not self._blob_store.exists(file_id):
            raise NotFoundError(file_id)
        return self._entry(file_id)

    def delete(self, file_id: FileId) -> None:
        if self._playback.current_file_id == file_id:
            self._playback.stop()
        self._pipeline.delete(file_id)

    def _entry(self, file_id: FileId) -> LibraryEntry:
        transcript = self._cache.get_transcript(file_id)
        run = self._pipeline.run_for(file_id)
        return LibraryEntry(
            file_id=file_id,
            title=self._cache.get_title(file_id),
            summary=self._cache.get_summary(file_id),
            transcript=transcript,
            preview=transcript_preview(transcript),
            state=run.state if run is not None else None,
            error=run.error if run is not None else '',
        )
