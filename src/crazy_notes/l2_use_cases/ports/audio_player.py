"""Port: audio output device."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class AudioPlayer(Protocol):
    """Abstract single-voice player."""

    def load(self, path: Path) -> float:
        """Decode *path* and return its duration in seconds. Raises PlaybackError."""
        ...

    def start(self) -> None:
        """Play the loaded audio from the beginning."""
        ...

    def stop(self) -> None:
        """Stop output; safe when idle."""
        ...

    def elapsed(self) -> float:
        """Seconds since start(), 0.0 when idle."""
        ...

    def is_active(self) -> bool:
        """True while audio is still being output."""
        ...
