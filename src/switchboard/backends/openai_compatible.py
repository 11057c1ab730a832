"""Chat Completions backend for OpenAI and OpenAI-compatible endpoints."""

from __future__ import annotations

import asyncio
from typing import Any

from switchboard.backends._errors import wrap_backend_error
from switchboard.backends.base import BackendId
from switchboard.backends.models import ChatRequest, ChatResponse
from switchboard.errors import BackendError


class OpenAICompatibleBackend:
    """OpenAI Chat Completions API backend.

    The same class serves any endpoint speaking the Chat Completions dialect
    (Hugging Face's router, for one) by binding it to a different base URL.
    """

    def __init__(
        self,
        api_key: str,
        *,
        provider: BackendId = BackendId.OPENAI,
        base_url: str | None = None,
    ) -> None:
        """Initialize with an API key and an optional endpoint override."""
        self.api_key = api_key
        self.provider = provider
        self.base_url = base_url
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the OpenAI client."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as e:
                raise BackendError(
                    "openai package not installed",
                    hint="pip install openai",
                    provider=self.provider,
                ) from e
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        """Send one chat completion request and normalize the reply."""
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=request.model,
                messages=request.messages,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise wrap_backend_error(e, provider=self.provider) from e
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> ChatResponse:
        """Pull the first choice's content, usage, and finish reason."""
        text: str | None = None
        finish_reason: str | None = None
        choices = getattr(response, "choices", None) or []
        if choices:
            first = choices[0]
            message = getattr(first, "message", None)
            content = getattr(message, "content", None)
            if isinstance(content, str) and content:
                text = content
            reason = getattr(first, "finish_reason", None)
            if isinstance(reason, str):
                finish_reason = reason

        usage: dict[str, int] = {}
        usage_raw = getattr(response, "usage", None)
        if usage_raw is not None:
            usage = {
                "input_tokens": int(getattr(usage_raw, "prompt_tokens", 0) or 0),
                "output_tokens": int(getattr(usage_raw, "completion_tokens", 0) or 0),
                "total_tokens": int(getattr(usage_raw, "total_tokens", 0) or 0),
            }

        model = getattr(response, "model", None)
        return ChatResponse(
            text=text,
            model=model if isinstance(model, str) else None,
            usage=usage,
            finish_reason=finish_reason,
        )

    async def aclose(self) -> None:
        """Close underlying async client resources."""
        client = self._client
        if client is None:
            return
        self._client = None
        await client.close()
