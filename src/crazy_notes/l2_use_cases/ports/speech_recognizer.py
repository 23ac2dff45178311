"""Port: external speech-recognition capability."""

from __future__ import annotations

import enum
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class AuthorizationStatus(enum.Enum):
    NOT_DETERMINED = 'not_determined'
    AUTHORIZED = 'authorized'
    DENIED = 'denied'


@dataclass(frozen=True)
class RecognitionEvent:
    """One recognition hypothesis. Only the event with is_final=True is authoritative."""

    text: str
    is_final: bool = False


class SpeechRecognizer(Protocol):
    """Abstract recognizer. Zero engine types leak through."""

    def authorization_status(self) -> AuthorizationStatus:
        """Current permission state; must not block."""
        ...

    def request_authorization(self) -> AuthorizationStatus:
        """Obtain permission once at process start. May block."""
        ...

    def recognize(self, audio_path: Path, locale: str) -> AsyncIterator[RecognitionEvent]:
        """Stream partial hypotheses followed by one final event. Raises on engine failure."""
        ...

    def close(self) -> None:
        """Release underlying engine resources."""
        ...
