"""Anthropic Messages API backend."""

from __future__ import annotations

import asyncio
from typing import Any

from switchboard.backends._errors import wrap_backend_error
from switchboard.backends.base import BackendId
from switchboard.backends.models import ChatRequest, ChatResponse
from switchboard.errors import BackendError


class AnthropicBackend:
    """Anthropic Messages API backend."""

    provider = BackendId.ANTHROPIC

    def __init__(self, api_key: str, *, base_url: str | None = None) -> None:
        """Initialize with an API key and an optional endpoint override."""
        self.api_key = api_key
        self.base_url = base_url
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the async Anthropic client."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError as e:
                raise BackendError(
                    "anthropic package not installed",
                    hint="pip install anthropic",
                    provider=self.provider,
                ) from e
            self._client = AsyncAnthropic(api_key=self.api_key, base_url=self.base_url)
        return self._client

    @staticmethod
    def _build_messages(
        messages: list[dict[str, Any]],
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Split chat-style messages into a system prompt and Messages API turns.

        The Messages API takes system text as a separate parameter and requires
        strict user/assistant alternation, so system turns are lifted out and
        consecutive same-role turns are merged via ``_append_message``.
        """
        system_parts: list[str] = []
        turns: list[dict[str, Any]] = []
        for item in messages:
            role = item.get("role")
            content = item.get("content")
            if role == "system":
                if content:
                    system_parts.append(str(content))
                continue
            _append_message(turns, {"role": role, "content": content})
        system = "\n\n".join(system_parts) if system_parts else None
        return system, turns

    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        """Send one Messages API request and normalize the reply."""
        client = self._get_client()
        system, turns = self._build_messages(request.messages)

        create_kwargs: dict[str, Any] = {
            "model": request.model,
            "messages": turns,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if system:
            create_kwargs["system"] = system

        try:
            response = await client.messages.create(**create_kwargs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise wrap_backend_error(e, provider=self.provider) from e
        return _parse_response(response)

    async def aclose(self) -> None:
        """Close underlying async client resources."""
        client = self._client
        if client is None:
            return
        self._client = None
        await client.close()


def _parse_response(response: Any) -> ChatResponse:
    """Join text blocks and map usage/stop reason into a ChatResponse."""
    text_parts: list[str] = []
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) != "text":
            continue
        block_text = getattr(block, "text", None)
        if isinstance(block_text, str) and block_text:
            text_parts.append(block_text)

    usage: dict[str, int] = {}
    usage_raw = getattr(response, "usage", None)
    if usage_raw is not None:
        input_tokens = int(getattr(usage_raw, "input_tokens", 0) or 0)
        output_tokens = int(getattr(usage_raw, "output_tokens", 0) or 0)
        usage = {
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
        }

    model = getattr(response, "model", None)
    return ChatResponse(
        text="".join(text_parts) or None,
        model=model if isinstance(model, str) else None,
        usage=usage,
        finish_reason=_normalize_stop_reason(getattr(response, "stop_reason", None)),
    )


def _normalize_stop_reason(stop_reason: Any) -> str | None:
    """Map Anthropic stop_reason to a normalized lowercase string."""
    if stop_reason is None:
        return None
    reason = str(stop_reason).lower()

    mapping: dict[str, str] = {
        "end_turn": "stop",
        "stop_sequence": "stop",
        "max_tokens": "length",
    }
    return mapping.get(reason, reason)


def _append_message(messages: list[dict[str, Any]], msg: dict[str, Any]) -> None:
    """Append *msg*, merging into the previous message when roles match."""
    if messages and messages[-1]["role"] == msg["role"]:
        prev = messages[-1]
        prev_content = prev["content"]
        new_content = msg["content"]
        # Normalize both sides to list-of-blocks for merging.
        if isinstance(prev_content, str):
            prev_content = [{"type": "text", "text": prev_content}]
        if isinstance(new_content, str):
            new_content = [{"type": "text", "text": new_content}]
        prev["content"] = prev_content + new_content
    else:
        messages.append(msg)
