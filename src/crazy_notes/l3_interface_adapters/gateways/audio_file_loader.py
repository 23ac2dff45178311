"""Gateway: audio decoding through an ffmpeg subprocess."""

from __future__ import annotations

import shutil
import subprocess  # noqa: S404 -- intentional: shells out to ffmpeg with a fixed arg list, not shell=True
from pathlib import Path

import numpy as np

from crazy_notes.l1_entities.audio_constants import SAMPLE_RATE

_FFMPEG_TIMEOUT = 300  # seconds


def load_audio_file(path: Path, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Decode *path* to float32 mono PCM at *sample_rate*.

    Handles whatever ffmpeg can read, including the m4a/AAC files the
    recorder and companion devices produce.

    Raises:
        FileNotFoundError: the recording does not exist.
        RuntimeError: ffmpeg is missing, failed, timed out, or decoded no audio.
    """
    if not path.exists():
        raise FileNotFoundError(f'Audio file not found: {path}')

    if shutil.which('ffmpeg') is None:
        raise RuntimeError('ffmpeg is required but not found on PATH.')

    cmd = ['ffmpeg', '-i', str(path), '-ar', str(sample_rate), '-ac', '1', '-f', 'f32le', '-v', 'quiet', 'pipe:1']

    try:
        result = subprocess.run(cmd, capture_output=True, timeout=_FFMPEG_TIMEOUT)  # noqa: S603
    except subprocess.TimeoutExpired as exc:
        raise RuntimeError(f'ffmpeg timed out after {_FFMPEG_TIMEOUT}s decoding: {path}') from exc
    except OSError as exc:
        raise RuntimeError(f'Failed to launch ffmpeg: {exc}') from exc

    if result.returncode != 0:
        stderr = result.stderr.decode('utf-8', errors='replace').strip()
        raise RuntimeError(f'ffmpeg exited with code {result.returncode} for: {path}\n{stderr}')

    audio = np.frombuffer(result.stdout, dtype=np.float32)
    if len(audio) == 0:
        raise RuntimeError(f'No decodable audio in: {path}')
    return audio
