"""Tool dispatch: validate, pick a backend and model, call it, render the outcome.

Every path through ``Dispatcher.handle_tool_call`` ends in a ToolResponse.
Caller mistakes, a missing configuration and backend failures are all
reported as text; none of them surface as protocol errors.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
import logging
from typing import TYPE_CHECKING, Any

from switchboard.backends.models import ChatRequest
from switchboard.catalog import CHAT_CONVERSATION, GENERATE_TEXT, LIST_MODELS
from switchboard.errors import InputError, describe_failure
from switchboard.request import (
    GenerationParameters,
    ToolRequest,
    parse_chat_arguments,
    parse_prompt_arguments,
)
from switchboard.result import (
    NO_RESPONSE_TEXT,
    ToolResponse,
    no_backends_text,
    render_model_list,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from switchboard.backends.base import BackendId
    from switchboard.registry import BackendRegistry

    ToolHandler = Callable[[Mapping[str, Any]], Awaitable[ToolResponse]]

logger = logging.getLogger(__name__)

_GENERATE_FALLBACK = "Failed to generate text"
_CHAT_FALLBACK = "Failed to process chat"


def select_backend(
    requested: str | None, available: Sequence[BackendId]
) -> BackendId:
    """Honor *requested* when it names a configured backend, else take the first.

    *available* must be non-empty and in priority order.
    """
    lookup = {backend_id.value: backend_id for backend_id in available}
    if requested is not None and requested in lookup:
        return lookup[requested]
    return available[0]


class Dispatcher:
    """Routes tool calls to handlers and handlers to backends.

    Holds a reference to the registry and nothing else, so concurrent calls
    share no mutable state.
    """

    def __init__(self, registry: BackendRegistry) -> None:
        self._registry = registry
        self._handlers: dict[str, ToolHandler] = {
            GENERATE_TEXT: self._generate_text,
            LIST_MODELS: self._list_models,
            CHAT_CONVERSATION: self._chat_conversation,
        }

    async def handle_tool_call(self, request: ToolRequest) -> ToolResponse:
        """Resolve and execute one tool call.

        Args:
            request: Tool name and raw arguments from the transport.

        Returns:
            Exactly one ToolResponse, whether the call succeeded or not.
        """
        handler = self._handlers.get(request.tool_name)
        if handler is None:
            return ToolResponse(f"Unknown tool: {request.tool_name}")

        arguments = request.arguments if isinstance(request.arguments, Mapping) else {}
        try:
            return await handler(arguments)
        except InputError as e:
            return ToolResponse.error(str(e))

    async def _generate_text(self, arguments: Mapping[str, Any]) -> ToolResponse:
        params = parse_prompt_arguments(arguments)
        return await self._complete(params, fallback=_GENERATE_FALLBACK)

    async def _chat_conversation(self, arguments: Mapping[str, Any]) -> ToolResponse:
        params = parse_chat_arguments(arguments)
        return await self._complete(params, fallback=_CHAT_FALLBACK)

    async def _list_models(self, arguments: Mapping[str, Any]) -> ToolResponse:
        _ = arguments
        available = self._registry.list_available()
        if not available:
            return ToolResponse(no_backends_text())
        return ToolResponse(render_model_list(self._registry, available))

    async def _complete(
        self, params: GenerationParameters, *, fallback: str
    ) -> ToolResponse:
        """Run one chat completion against the selected backend."""
        available = self._registry.list_available()
        if not available:
            return ToolResponse(no_backends_text())

        backend_id = select_backend(params.provider, available)
        model = params.model or self._registry.default_model_for(backend_id)
        client = self._registry.client_for(backend_id)

        logger.info("Making request to %s with model: %s", backend_id, model)
        try:
            response = await client.chat_completion(
                ChatRequest(
                    model=model,
                    messages=params.messages,
                    max_tokens=params.max_tokens,
                    temperature=params.temperature,
                )
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            message = describe_failure(exc, backend_id.value, fallback=fallback)
            hint = getattr(exc, "hint", None)
            if hint:
                logger.warning("%s API error: %s (%s)", backend_id, message, hint)
            else:
                logger.warning("%s API error: %s", backend_id, message)
            logger.debug("Backend failure detail", exc_info=exc)
            return ToolResponse.error(message)

        if response is not None:
            logger.info(
                "%s replied (model=%s, finish_reason=%s, usage=%s)",
                backend_id,
                response.model or model,
                response.finish_reason,
                response.usage or "n/a",
            )
        text = getattr(response, "text", None)
        if not isinstance(text, str) or not text:
            return ToolResponse(NO_RESPONSE_TEXT)
        return ToolResponse(text)
