"""Gateway: whisper.cpp model resolution from the Hugging Face hub."""

from __future__ import annotations

import logging
from pathlib import Path

from huggingface_hub import hf_hub_download
from pywhispercpp.constants import MODELS_DIR

from crazy_notes.l1_entities.errors import ModelResolutionError

log = logging.getLogger('cn.recognizer')

WHISPER_CPP_REPO = 'ggerganov/whisper.cpp'
WHISPER_CPP_MODELS = {
    'large-v3-turbo-q8_0': 'ggml-large-v3-turbo-q8_0.bin',
    'large-v3-turbo-q5_0': 'ggml-large-v3-turbo-q5_0.bin',
    'large-v3-turbo': 'ggml-large-v3-turbo.bin',
    'medium-q5_0': 'ggml-medium-q5_0.bin',
    'small-q8_0': 'ggml-small-q8_0.bin',
    'base-q8_0': 'ggml-base-q8_0.bin',
}


class HfModelResolver:
    """Maps a model name (or absolute path) to a local ggml file, downloading when needed."""

    def __init__(self, cache_dir: Path | None = None) -> None:
        self._cache_dir = cache_dir or Path(MODELS_DIR) / 'whisper-cpp'

    def resolve(self, model_name: str) -> str:
        if Path(model_name).is_absolute():
            if not Path(model_name).exists():
                raise ModelResolutionError(f'Model file not found: {model_name}')
            return model_name

        filename = WHISPER_CPP_MODELS.get(model_name)
        if filename is None:
            raise ModelResolutionError(f'Unknown whisper model: {model_name}')

        local_path = self._cache_dir / filename
        if local_path.exists():
            return str(local_path)

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        log.info('Downloading %s from %s', filename, WHISPER_CPP_REPO)
        try:
            return hf_hub_download(repo_id=WHISPER_CPP_REPO, filename=filename, local_dir=self._cache_dir)
        except Exception as e:
            raise ModelResolutionError(f'Cannot download {model_name}: {e}') from e
