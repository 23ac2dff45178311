"""Use case: ingestion pipeline — transcription then summarization, one run per FileId."""

from __future__ import annotations

import asyncio
import logging

from crazy_notes.l1_entities.annotation import Annotation
from crazy_notes.l1_entities.pipeline_run import PipelineRun, PipelineState
from crazy_notes.l1_entities.recording import AudioBlob, FileId
from crazy_notes.l2_use_cases.annotation_cache import AnnotationCache
from crazy_notes.l2_use_cases.ports.blob_store import BlobStore
from crazy_notes.l2_use_cases.summarization_stage import SummarizationStage
from crazy_notes.l2_use_cases.transcription_stage import TranscriptionStage

log = logging.getLogger('cn.pipeline')


class IngestionPipeline:
    """Schedules and tracks per-file runs on the running asyncio loop.

    Runs for different files are independent tasks. Within a run the
    transcript is written before summarization starts. A run whose FileId is
    deleted mid-flight is marked discarded and its late results are dropped.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        cache: AnnotationCache,
        transcription: TranscriptionStage,
        summarization: SummarizationStage,
        *,
        summarize_empty_transcripts: bool = True,
    ) -> None:
        self._blob_store = blob_store
        self._cache = cache
        self._transcription = transcription
        self._summarization = summarization
        self._summarize_empty = summarize_empty_transcripts

        self._runs: dict[FileId, PipelineRun] = {}
        self._tasks: set[asyncio.Task] = set()

    def start(self, blob: AudioBlob) -> bool:
        """Begin processing *blob*. Returns False when a run for its FileId is still active."""
        current = self._runs.get(blob.file_id)
        if current is not None and not current.is_terminal:
            log.info('Run already active for %s (%s); start ignored', blob.file_id, current.state.value)
            return False

        run = PipelineRun(file_id=blob.file_id)
        self._runs[blob.file_id] = run
        task = asyncio.get_running_loop().create_task(self._drive(run, blob), name=f'pipeline:{blob.file_id}')
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        log.info('Run started for %s', blob.file_id)
        return True

    def delete(self, file_id: FileId) -> None:
        """Delete the recording and every derived entry; late results for it are discarded.

        Raises NotFoundError/StorageError from the blob store. The cache is
        purged regardless so no annotation outlives its recording.
        """
        run = self._runs.pop(file_id, None)
        if run is not None and not run.is_terminal:
            run.discarded = True
            log.info('Discarding in-flight run for %s (%s)', file_id, run.state.value)
        try:
            self._blob_store.delete(file_id)
        finally:
            self._cache.remove(file_id)
        log.info('Deleted %s', file_id)

    def run_for(self, file_id: FileId) -> PipelineRun | None:
        return self._runs.get(file_id)

    async def join(self) -> None:
        """Wait until every scheduled run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _drive(self, run: PipelineRun, blob: AudioBlob) -> None:
        try:
            await self._run_stages(run, blob)
        except Exception as e:
            run.error = f'{type(e).__name__}: {e}'
            if run.state is PipelineState.SUMMARIZING:
                run.state = PipelineState.SUMMARY_FAILED
            else:
                run.state = PipelineState.TRANSCRIPT_FAILED
            log.error('Run for %s aborted: %s', run.file_id, run.error, exc_info=True)

    async def _run_stages(self, run: PipelineRun, blob: AudioBlob) -> None:
        run.state = PipelineState.TRANSCRIBING
        transcript = await self._transcription.transcribe(blob)
        if run.discarded:
            log.info('Dropping transcript for deleted %s', run.file_id)
            return
        if transcript.text is None:
            run.state = PipelineState.TRANSCRIPT_FAILED
            run.error = str(transcript.error)
            log.warning('Transcription failed for %s: %s', run.file_id, run.error)
            return

        self._cache.put_transcript(run.file_id, transcript.text)

        if not transcript.text and not self._summarize_empty:
            empty = Annotation.empty()
            self._cache.put_annotation(run.file_id, empty.title, empty.summary)
            run.state = PipelineState.DONE
            log.info('Empty transcript for %s; summarization skipped', run.file_id)
            return

        run.state = PipelineState.SUMMARIZING
        summary = await self._summarization.summarize(transcript.text)
        if run.discarded:
            log.info('Dropping annotation for deleted %s', run.file_id)
            return

        self._cache.put_annotation(run.file_id, summary.annotation.title, summary.annotation.summary)
        if summary.ok:
            run.state = PipelineState.DONE
            log.info('Run done for %s: %r', run.file_id, summary.annotation.title)
        else:
            run.state = PipelineState.SUMMARY_FAILED
            run.error = str(summary.error)
            log.warning('Summarization failed for %s: %s', run.file_id, run.error)
