"""Use case: turn one stored recording into its final transcript."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from crazy_notes.l1_entities.errors import RecognitionError, StageError, UnauthorizedError
from crazy_notes.l1_entities.recording import AudioBlob
from crazy_notes.l2_use_cases.ports.speech_recognizer import AuthorizationStatus, SpeechRecognizer

log = logging.getLogger('cn.stage')


@dataclass(frozen=True)
class TranscriptionResult:
    """Terminal outcome of a transcription attempt: final text or the failure."""

    text: str | None = None
    error: StageError | None = None

    @property
    def ok(self) -> bool:
        return self.text is not None


class TranscriptionStage:
    """Drives the recognizer for one blob and reports exactly one terminal result.

    Partial hypotheses are ignored. An empty final transcript is a success.
    """

    def __init__(self, recognizer: SpeechRecognizer, locale: str) -> None:
        self._recognizer = recognizer
        self._locale = locale

    def authorize(self) -> AuthorizationStatus:
        """Request recognition permission. Called once at process start."""
        status = self._recognizer.request_authorization()
        if status is AuthorizationStatus.AUTHORIZED:
            log.info('Speech recognition authorized')
        else:
            log.warning('Speech recognition not authorized: %s', status.value)
        return status

    async def transcribe(self, blob: AudioBlob) -> TranscriptionResult:
        if self._recognizer.authorization_status() is not AuthorizationStatus.AUTHORIZED:
            log.warning('Skipping %s: speech recognition not authorized', blob.file_id)
            return TranscriptionResult(error=UnauthorizedError('Speech recognition is not authorized'))

        final_text: str | None = None
        partials = 0
        try:
            async for event in self._recognizer.recognize(blob.path, self._locale):
                if not event.is_final:
                    partials += 1
                    continue
                final_text = event.text
                break
        except Exception as e:
            err = f'Recognition failed for {blob.file_id}: {type(e).__name__}: {e}'
            log.error(err, exc_info=True)
            return TranscriptionResult(error=RecognitionError(err))

        if final_text is None:
            err = f'Recognizer ended without a final result for {blob.file_id}'
            log.error(err)
            return TranscriptionResult(error=RecognitionError(err))

        text = final_text.strip()
        log.info('Transcribed %s: %d chars after %d partial results', blob.file_id, len(text), partials)
        return TranscriptionResult(text=text)
