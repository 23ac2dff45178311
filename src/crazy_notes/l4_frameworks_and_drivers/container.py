"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from pathlib import Path

from crazy_notes.l1_entities.config import AppConfig
from crazy_notes.l2_use_cases.annotation_cache import AnnotationCache
from crazy_notes.l2_use_cases.assistant_use_case import AskAssistantUseCase
from crazy_notes.l2_use_cases.ingestion_pipeline import IngestionPipeline
from crazy_notes.l2_use_cases.playback_session import PlaybackSession
from crazy_notes.l2_use_cases.ports.audio_player import AudioPlayer
from crazy_notes.l2_use_cases.ports.blob_store import BlobStore
from crazy_notes.l2_use_cases.ports.llm_client import LLMClient
from crazy_notes.l2_use_cases.ports.speech_recognizer import SpeechRecognizer
from crazy_notes.l2_use_cases.summarization_stage import SummarizationStage
from crazy_notes.l2_use_cases.transcription_stage import TranscriptionStage
from crazy_notes.l3_interface_adapters.controllers.library_controller import LibraryController
from crazy_notes.l3_interface_adapters.gateways.directory_blob_store import DirectoryBlobStore
from crazy_notes.l3_interface_adapters.gateways.file_note_writer import FileNoteWriter
from crazy_notes.l3_interface_adapters.gateways.json_annotation_store import JsonAnnotationStore
from crazy_notes.l3_interface_adapters.gateways.openai_llm_client import OpenAICompatLLMClient
from crazy_notes.l4_frameworks_and_drivers.config import InfraConfig


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        *,
        recognizer: SpeechRecognizer | None = None,
        player: AudioPlayer | None = None,
        llm_client: LLMClient | None = None,
    ) -> None:
        self.config = config
        _infra = infra or InfraConfig()
        storage = config.storage

        self.blob_store: BlobStore = DirectoryBlobStore(Path(storage.recordings_dir))
        self.cache = AnnotationCache(JsonAnnotationStore(Path(storage.annotations_dir)))
        self.llm_client: LLMClient = llm_client or OpenAICompatLLMClient(
            api_key=_infra.openai.api_key,
            base_url=_infra.openai.base_url,
        )
        self.recognizer: SpeechRecognizer = recognizer or self._build_recognizer(config)
        self.player: AudioPlayer = player or self._build_player()

        self.transcription = TranscriptionStage(self.recognizer, config.recognition.locale)
        self.summarization = SummarizationStage(
            self.llm_client,
            model=config.summarization.model,
            title_length=config.summarization.title_length,
        )
        self.pipeline = IngestionPipeline(
            self.blob_store,
            self.cache,
            self.transcription,
            self.summarization,
            summarize_empty_transcripts=config.summarization.summarize_empty_transcripts,
        )
        self.playback = PlaybackSession(self.blob_store, self.player)
        self.assistant = AskAssistantUseCase(
            self.llm_client,
            FileNoteWriter(Path(storage.notes_dir)),
            model=config.assistant.model,
        )

        self.controller = LibraryController(
            blob_store=self.blob_store,
            cache=self.cache,
            pipeline=self.pipeline,
            playback=self.playback,
            transcription=self.transcription,
        )

    @staticmethod
    def _build_recognizer(config: AppConfig) -> SpeechRecognizer:
        from crazy_notes.l3_interface_adapters.gateways.whisper_speech_recognizer import (  # noqa: PLC0415 -- deferred: pywhispercpp only when recognizing
            WhisperSpeechRecognizer,
        )

        return WhisperSpeechRecognizer(config.recognition.model, chunk_duration=config.recognition.chunk_duration)

    @staticmethod
    def _build_player() -> AudioPlayer:
        from crazy_notes.l3_interface_adapters.gateways.sounddevice_audio_player import (  # noqa: PLC0415 -- deferred: PortAudio only when playing
            SounddeviceAudioPlayer,
        )

        return SounddeviceAudioPlayer()
