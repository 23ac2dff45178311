"""Gateway: whisper.cpp recognizer in a subprocess — implements SpeechRecognizer port."""

from __future__ import annotations

import asyncio
import logging
import multiprocessing as mp
import os
from collections.abc import AsyncIterator, Callable
from multiprocessing.connection import Connection
from pathlib import Path
from typing import Any

import numpy as np

from crazy_notes.l1_entities.audio_constants import SAMPLE_RATE
from crazy_notes.l1_entities.errors import ModelResolutionError
from crazy_notes.l2_use_cases.ports.speech_recognizer import AuthorizationStatus, RecognitionEvent
from crazy_notes.l3_interface_adapters.gateways.audio_file_loader import load_audio_file
from crazy_notes.l3_interface_adapters.gateways.hf_model_resolver import HfModelResolver

log = logging.getLogger('cn.recognizer')

_NO_SPACE_LANGUAGES = frozenset({'zh', 'ja', 'ko', 'th'})
_IPC_TIMEOUT = 300  # seconds


def _engine_entry(model_path: str, conn: Any) -> None:
    """Subprocess main: load the whisper.cpp model, then serve transcription requests.

    C-level stdout/stderr go to /dev/null; whisper.cpp logs through fprintf.
    """
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, 1)
    os.dup2(devnull, 2)
    os.close(devnull)

    try:
        from pywhispercpp.model import Model  # noqa: PLC0415 -- deferred: subprocess only

        model = Model(model_path, print_progress=False, print_realtime=False)
    except Exception as e:
        conn.send({'status': 'error', 'error': str(e)})
        conn.close()
        return

    conn.send({'status': 'ready'})

    while True:
        req = conn.recv()
        if req is None:
            break
        try:
            segments = model.transcribe(req['audio'], language=req['language'])
            texts = [seg.text.strip() for seg in segments if seg.text.strip()]
            conn.send({'status': 'ok', 'texts': texts})
        except Exception as e:
            conn.send({'status': 'error', 'error': str(e)})

    conn.close()


class WhisperEngineProcess:
    """One whisper.cpp model living in a spawned child process.

    whisper.cpp holds the GIL for the whole inference; a child process keeps
    the parent's event loop responsive. Requests are strictly one at a time.
    """

    def __init__(self) -> None:
        self._process: Any = None  # SpawnProcess
        self._conn: Connection | None = None

    def start(self, model_path: str) -> None:
        ctx = mp.get_context('spawn')
        parent_conn, child_conn = ctx.Pipe(duplex=True)
        self._process = ctx.Process(target=_engine_entry, args=(model_path, child_conn), daemon=True)
        self._process.start()
        child_conn.close()
        self._conn = parent_conn

        result = self._receive('model load')
        if result.get('status') != 'ready':
            raise RuntimeError(f'Whisper subprocess failed to init: {result.get("error", "unknown")}')

    def transcribe(self, audio: np.ndarray, language: str) -> list[str]:
        if self._conn is None:
            raise RuntimeError('Engine not started. Call start() first.')
        self._conn.send({'audio': audio, 'language': language})
        result = self._receive('transcription')
        if result.get('status') == 'error':
            raise RuntimeError(result['error'])
        return result.get('texts', [])

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.send(None)
                self._conn.close()
            except OSError:
                log.debug('Engine pipe already closed')
            self._conn = None
        if self._process is not None:
            self._process.join(timeout=5)
            if self._process.is_alive():
                self._process.terminate()
                self._process.join(timeout=1)
            self._process = None

    def _receive(self, what: str) -> dict:
        assert self._conn is not None
        try:
            if not self._conn.poll(timeout=_IPC_TIMEOUT):
                raise RuntimeError(f'Timeout waiting for {what}')
            return self._conn.recv()
        except EOFError as e:
            raise RuntimeError(f'Whisper subprocess exited unexpectedly during {what}') from e


class WhisperSpeechRecognizer:
    """Recognizes a whole recording window by window.

    Emits the cumulative text after every window as a partial event and the
    complete text as the final event. "Authorized" means the configured model
    resolved to a local file.
    """

    def __init__(
        self,
        model_name: str,
        chunk_duration: float = 30.0,
        resolver: HfModelResolver | None = None,
        engine_factory: Callable[[], WhisperEngineProcess] = WhisperEngineProcess,
    ) -> None:
        self._model_name = model_name
        self._chunk_samples = max(int(SAMPLE_RATE * chunk_duration), 1)
        self._resolver = resolver or HfModelResolver()
        self._engine_factory = engine_factory
        self._engine: WhisperEngineProcess | None = None
        self._model_path: str | None = None
        self._status = AuthorizationStatus.NOT_DETERMINED
        self._lock = asyncio.Lock()

    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    def request_authorization(self) -> AuthorizationStatus:
        try:
            self._model_path = self._resolver.resolve(self._model_name)
            self._status = AuthorizationStatus.AUTHORIZED
        except ModelResolutionError as e:
            log.warning('Whisper model unavailable: %s', e)
            self._status = AuthorizationStatus.DENIED
        return self._status

    async def recognize(self, audio_path: Path, locale: str) -> AsyncIterator[RecognitionEvent]:
        if self._model_path is None:
            raise RuntimeError('Recognizer not authorized. Call request_authorization() first.')

        audio = await asyncio.to_thread(load_audio_file, audio_path)
        language = locale.split('-')[0].lower()
        separator = '' if language in _NO_SPACE_LANGUAGES else ' '
        texts: list[str] = []

        async with self._lock:
            engine = await self._ensure_engine()
            for offset in range(0, len(audio), self._chunk_samples):
                window = audio[offset : offset + self._chunk_samples]
                texts.extend(await asyncio.to_thread(engine.transcribe, window, language))
                yield RecognitionEvent(text=separator.join(texts))

        log.debug('Recognized %s: %d segments', audio_path.name, len(texts))
        yield RecognitionEvent(text=separator.join(texts), is_final=True)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.close()
            self._engine = None

    async def _ensure_engine(self) -> WhisperEngineProcess:
        if self._engine is None:
            engine = self._engine_factory()
            await asyncio.to_thread(engine.start, self._model_path)
            self._engine = engine
        return self._engine
