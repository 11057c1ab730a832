"""Backend implementations."""

from .anthropic import AnthropicBackend
from .base import BACKEND_SPECS, BackendId, BackendSpec, ChatBackend
from .models import ChatRequest, ChatResponse
from .openai_compatible import OpenAICompatibleBackend

__all__ = [
    "BACKEND_SPECS",
    "AnthropicBackend",
    "BackendId",
    "BackendSpec",
    "ChatBackend",
    "ChatRequest",
    "ChatResponse",
    "OpenAICompatibleBackend",
]
