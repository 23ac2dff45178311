"""Gateway: sounddevice output — implements AudioPlayer port."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

import numpy as np
import sounddevice as sd

from crazy_notes.l1_entities.audio_constants import SAMPLE_RATE
from crazy_notes.l1_entities.errors import PlaybackError
from crazy_notes.l3_interface_adapters.gateways.audio_file_loader import load_audio_file


class SounddeviceAudioPlayer:
    """Decodes a recording with ffmpeg and plays it on the default output device."""

    def __init__(self, sample_rate: int = SAMPLE_RATE, clock: Callable[[], float] = time.monotonic) -> None:
        self._sample_rate = sample_rate
        self._clock = clock
        self._audio: np.ndarray | None = None
        self._duration = 0.0
        self._started_at: float | None = None

    def load(self, path: Path) -> float:
        self.stop()
        try:
            self._audio = load_audio_file(path, self._sample_rate)
        except (FileNotFoundError, RuntimeError) as exc:
            self._audio = None
            self._duration = 0.0
            raise PlaybackError(f'Cannot play {path.name}: {exc}') from exc
        self._duration = len(self._audio) / self._sample_rate
        return self._duration

    def start(self) -> None:
        if self._audio is None:
            raise PlaybackError('Nothing loaded')
        try:
            sd.play(self._audio, self._sample_rate)
        except sd.PortAudioError as exc:
            raise PlaybackError(f'Audio output failed: {exc}') from exc
        self._started_at = self._clock()

    def stop(self) -> None:
        if self._started_at is not None:
            sd.stop()
            self._started_at = None

    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return min(self._clock() - self._started_at, self._duration)

    def is_active(self) -> bool:
        return self._started_at is not None and self._clock() - self._started_at < self._duration
