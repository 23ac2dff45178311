"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from crazy_notes.l1_entities.annotation import Annotation
from crazy_notes.l1_entities.config import AppConfig
from crazy_notes.l1_entities.errors import StorageError
from crazy_notes.l2_use_cases.ports.llm_client import ChatReply
from crazy_notes.l2_use_cases.ports.speech_recognizer import AuthorizationStatus, RecognitionEvent
from crazy_notes.l4_frameworks_and_drivers.config import build_app_config


def json_reply(content: str, status_code: int = 200) -> ChatReply:
    """Build a well-formed chat-completion reply carrying *content*."""
    body = json.dumps({'choices': [{'message': {'role': 'assistant', 'content': content}}]})
    return ChatReply(status_code=status_code, content_type='application/json; charset=utf-8', body=body)


# --- Protocol-conforming Fakes ---


class FakeLLMClient:
    """Fake LLM client. Replies are consumed in order; the last one repeats."""

    def __init__(self, replies: list[ChatReply | Exception] | None = None):
        self._replies = list(replies or [json_reply('Fake LLM response')])
        self.complete_calls: list[tuple[str, str]] = []
        self._connectivity = (True, '')

    async def complete(self, model: str, prompt: str) -> ChatReply:
        self.complete_calls.append((model, prompt))
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def check_connectivity(self) -> tuple[bool, str]:
        return self._connectivity

    def set_replies(self, replies: list[ChatReply | Exception]) -> None:
        self._replies = list(replies)

    def set_connectivity(self, ok: bool, msg: str = '') -> None:
        self._connectivity = (ok, msg)


class FakeSpeechRecognizer:
    """Fake recognizer. Emits *events* per call; an optional gate holds the stream open."""

    def __init__(
        self,
        events: list[RecognitionEvent] | None = None,
        status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED,
        error: Exception | None = None,
    ):
        self._events = events if events is not None else [RecognitionEvent('hello world', is_final=True)]
        self._status = status
        self._error = error
        self.gate: asyncio.Event | None = None
        self.recognize_calls: list[tuple[Path, str]] = []
        self.authorization_requests = 0
        self.closed = False

    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    def request_authorization(self) -> AuthorizationStatus:
        self.authorization_requests += 1
        return self._status

    async def recognize(self, audio_path: Path, locale: str):
        self.recognize_calls.append((audio_path, locale))
        if self.gate is not None:
            await self.gate.wait()
        if self._error is not None:
            raise self._error
        for event in self._events:
            yield event

    def close(self) -> None:
        self.closed = True

    def set_events(self, events: list[RecognitionEvent]) -> None:
        self._events = events


class FakeAnnotationStore:
    """In-memory AnnotationStore with write counters and failure injection."""

    def __init__(
        self,
        transcripts: dict[str, str] | None = None,
        annotations: dict[str, Annotation] | None = None,
    ):
        self.transcripts = dict(transcripts or {})
        self.annotations = dict(annotations or {})
        self.transcript_writes = 0
        self.annotation_writes = 0
        self.fail_writes = False

    def read_transcripts(self) -> dict[str, str]:
        return dict(self.transcripts)

    def read_annotations(self) -> dict[str, Annotation]:
        return dict(self.annotations)

    def write_transcripts(self, transcripts: dict[str, str]) -> None:
        if self.fail_writes:
            raise StorageError('disk full')
        self.transcript_writes += 1
        self.transcripts = dict(transcripts)

    def write_annotations(self, annotations: dict[str, Annotation]) -> None:
        if self.fail_writes:
            raise StorageError('disk full')
        self.annotation_writes += 1
        self.annotations = dict(annotations)


class FakeAudioPlayer:
    """Fake player with a manually advanced clock."""

    def __init__(self, duration: float = 10.0):
        self.duration = duration
        self.now = 0.0
        self.loaded: list[Path] = []
        self.start_calls = 0
        self.stop_calls = 0
        self._started = False
        self.load_error: Exception | None = None

    def load(self, path: Path) -> float:
        if self.load_error is not None:
            raise self.load_error
        self.loaded.append(path)
        self.now = 0.0
        return self.duration

    def start(self) -> None:
        self.start_calls += 1
        self._started = True

    def stop(self) -> None:
        self.stop_calls += 1
        self._started = False

    def elapsed(self) -> float:
        return self.now if self._started else 0.0

    def is_active(self) -> bool:
        return self._started and self.now < self.duration


class FakeNoteWriter:
    def __init__(self, notes_dir: Path | None = None):
        self._notes_dir = notes_dir or Path('/fake/notes')
        self.notes: dict[str, str] = {}

    def save_note(self, name: str, content: str) -> Path:
        self.notes[name] = content
        return self._notes_dir / f'{name}.txt'


# --- Standard Fixtures ---


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def tmp_config(tmp_path: Path) -> AppConfig:
    return build_app_config({
        'storage': {
            'recordings_dir': str(tmp_path / 'recordings'),
            'annotations_dir': str(tmp_path / 'annotations'),
            'notes_dir': str(tmp_path / 'notes'),
        },
    })


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
recognition:
  model: "base-q8_0"
  locale: "en-US"
  chunk_duration: 10.0
summarization:
  model: "gpt-4o-mini"
  title_length: 8
assistant:
  model: "gpt-4o-mini"
openai:
  base_url: "http://localhost:8000/v1"
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def fake_recognizer() -> FakeSpeechRecognizer:
    return FakeSpeechRecognizer()


@pytest.fixture
def fake_store() -> FakeAnnotationStore:
    return FakeAnnotationStore()
