"""Port: chat-completion endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ChatReply:
    """Raw successful (2xx) reply; body interpretation is left to the caller."""

    status_code: int
    content_type: str
    body: str


class LLMClient(Protocol):
    """Abstract chat-completion client. Zero framework types leak through."""

    async def complete(self, model: str, prompt: str) -> ChatReply:
        """Send one user message. Raises RequestFailedError on transport error or non-2xx."""
        ...

    def check_connectivity(self) -> tuple[bool, str]:
        """Pre-flight connectivity check. Returns (ok, error_message)."""
        ...
