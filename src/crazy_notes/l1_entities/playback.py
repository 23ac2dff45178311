"""Playback position value object."""

from __future__ import annotations

from pydantic import BaseModel


def format_clock(seconds: float) -> str:
    """Format seconds as MM:SS for the progress display."""
    total = int(seconds)
    return f'{total // 60:02d}:{total % 60:02d}'


class PlaybackPosition(BaseModel):
    model_config = {'frozen': True}

    elapsed: float = 0.0
    total: float = 0.0

    @property
    def progress(self) -> float:
        """Fraction played, 0.0 when nothing is loaded."""
        if self.total <= 0:
            return 0.0
        return min(self.elapsed / self.total, 1.0)

    def label(self) -> str:
        return f'{format_clock(self.elapsed)} / {format_clock(self.total)}'
