"""Port: persistence for assistant notes."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class NoteWriter(Protocol):
    def save_note(self, name: str, content: str) -> Path:
        """Write *content* as a note called *name*. Returns the written path."""
        ...
