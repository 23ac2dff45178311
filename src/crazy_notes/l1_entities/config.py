"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    recordings_dir: str
    annotations_dir: str
    notes_dir: str


class RecognitionConfig(BaseModel):
    model: str
    locale: str
    chunk_duration: float

    @property
    def language(self) -> str:
        """Primary language subtag whisper expects, e.g. 'zh' for 'zh-CN'."""
        return self.locale.split('-')[0].lower()


class SummarizationConfig(BaseModel):
    model: str
    title_length: int = Field(gt=0)
    summarize_empty_transcripts: bool = True


class AssistantConfig(BaseModel):
    model: str


class AppConfig(BaseModel):
    storage: StorageConfig
    recognition: RecognitionConfig
    summarization: SummarizationConfig
    assistant: AssistantConfig
