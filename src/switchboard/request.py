"""Tool request normalization.

Turns raw MCP tool arguments into GenerationParameters, raising InputError
for the cases a caller must fix. Only presence and shape are checked here;
numeric bounds advertised in the tool schemas are left to the backend.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from switchboard.errors import InputError

DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.7

PROMPT_REQUIRED = "Prompt is required"
MESSAGES_REQUIRED = "Messages array is required"
MESSAGE_FIELDS_REQUIRED = "Each message must include role and content"


@dataclass(frozen=True)
class ToolRequest:
    """One tool invocation as delivered by the transport."""

    tool_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationParameters:
    """Validated inputs shared by the two generation tools."""

    messages: list[dict[str, Any]]
    provider: str | None = None
    model: str | None = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE


def _common_options(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Pick out provider/model/max_tokens/temperature with their defaults."""
    provider = arguments.get("provider")
    model = arguments.get("model")
    max_tokens = arguments.get("max_tokens")
    temperature = arguments.get("temperature")
    return {
        "provider": provider if isinstance(provider, str) and provider else None,
        "model": model if isinstance(model, str) and model else None,
        "max_tokens": DEFAULT_MAX_TOKENS if max_tokens is None else max_tokens,
        "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature,
    }


def _is_message(item: Any) -> bool:
    return (
        isinstance(item, Mapping)
        and isinstance(item.get("role"), str)
        and isinstance(item.get("content"), str)
    )


def parse_prompt_arguments(arguments: Mapping[str, Any]) -> GenerationParameters:
    """Normalize ``generate_text`` arguments into a single user turn.

    Raises:
        InputError: If ``prompt`` is missing, not a string, or empty.
    """
    prompt = arguments.get("prompt")
    if not isinstance(prompt, str) or not prompt:
        raise InputError(PROMPT_REQUIRED)
    return GenerationParameters(
        messages=[{"role": "user", "content": prompt}],
        **_common_options(arguments),
    )


def parse_chat_arguments(arguments: Mapping[str, Any]) -> GenerationParameters:
    """Normalize ``chat_conversation`` arguments; messages are kept verbatim.

    Raises:
        InputError: If ``messages`` is missing, not a list, empty, or holds an
            entry without string ``role`` and ``content`` values.
    """
    messages = arguments.get("messages")
    if not isinstance(messages, list) or not messages:
        raise InputError(MESSAGES_REQUIRED)
    for item in messages:
        if not _is_message(item):
            raise InputError(MESSAGE_FIELDS_REQUIRED)
    return GenerationParameters(
        messages=[dict(item) for item in messages],
        **_common_options(arguments),
    )
