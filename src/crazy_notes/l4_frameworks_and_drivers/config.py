"""Application defaults and provider configs — lives in L4, not domain."""

from __future__ import annotations

import copy

from pydantic import BaseModel, Field

from crazy_notes.l1_entities.config import AppConfig
from crazy_notes.l3_interface_adapters.gateways.paths import DATA_DIR
from crazy_notes.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'storage': {
        'recordings_dir': str(DATA_DIR / 'recordings'),
        'annotations_dir': str(DATA_DIR / 'annotations'),
        'notes_dir': str(DATA_DIR / 'notes'),
    },
    'recognition': {
        'model': 'large-v3-turbo-q8_0',
        'locale': 'zh-CN',
        'chunk_duration': 30.0,
    },
    'summarization': {
        'model': 'gpt-4',
        'title_length': 5,
        'summarize_empty_transcripts': True,
    },
    'assistant': {
        'model': 'gpt-3.5-turbo',
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


class OpenAIProviderConfig(BaseModel):
    api_key: str | None = None  # None → SDK reads OPENAI_API_KEY env
    base_url: str = 'https://api.openai.com/v1'


class InfraConfig(BaseModel):
    """Groups all provider-specific settings outside the domain layer."""

    openai: OpenAIProviderConfig = Field(default_factory=OpenAIProviderConfig)
