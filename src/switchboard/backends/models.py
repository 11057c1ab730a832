"""Domain models for the backend transport layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChatRequest:
    """A unified request payload for one chat-completion call.

    ``messages`` is forwarded as given: role/content mappings, in order.
    """

    model: str
    messages: list[dict[str, Any]]
    max_tokens: int = 1024
    temperature: float = 0.7


@dataclass
class ChatResponse:
    """A standardized response from a chat-completion call.

    ``text`` is ``None`` when the backend answered without any content.
    """

    text: str | None = None
    model: str | None = None
    usage: dict[str, int] = field(default_factory=dict)
    finish_reason: str | None = None
