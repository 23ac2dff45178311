"""Gateway: local microphone recorder producing WAV bytes."""

from __future__ import annotations

import io
import queue
import time
import wave

import numpy as np
import sounddevice as sd

from crazy_notes.l1_entities.audio_constants import CHANNELS, SAMPLE_RATE


def encode_wav(audio: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Encode float32 mono samples as 16-bit PCM WAV."""
    buf = io.BytesIO()
    with wave.open(buf, 'wb') as wf:
        wf.setnchannels(CHANNELS)
        wf.setsampwidth(2)  # int16
        wf.setframerate(sample_rate)
        pcm = np.clip(audio, -1.0, 1.0)
        wf.writeframes((pcm * 32767).astype(np.int16).tobytes())
    return buf.getvalue()


class SounddeviceRecorder:
    """Captures the default input device until a duration elapses or the caller interrupts."""

    def __init__(self, sample_rate: int = SAMPLE_RATE) -> None:
        self._sample_rate = sample_rate
        self._queue: queue.Queue[np.ndarray] = queue.Queue()

    def record(self, seconds: float | None = None) -> bytes:
        """Record and return WAV bytes. KeyboardInterrupt ends the capture and keeps what was recorded."""

        def _callback(indata, frames, time_info, status):
            self._queue.put(indata.copy())

        chunks: list[np.ndarray] = []
        stream = sd.InputStream(samplerate=self._sample_rate, channels=CHANNELS, dtype='float32', callback=_callback)
        deadline = time.monotonic() + seconds if seconds is not None else None
        stream.start()
        try:
            while deadline is None or time.monotonic() < deadline:
                try:
                    chunks.append(self._queue.get(timeout=0.1).flatten())
                except queue.Empty:
                    continue
        except KeyboardInterrupt:  # noqa: S110 -- Ctrl-C is the "stop recording" gesture
            pass
        finally:
            stream.stop()
            stream.close()

        while not self._queue.empty():
            chunks.append(self._queue.get_nowait().flatten())

        audio = np.concatenate(chunks) if chunks else np.array([], dtype=np.float32)
        return encode_wav(audio, self._sample_rate)
