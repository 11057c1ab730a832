"""Backend protocol and the closed set of supported backends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from switchboard.backends.models import ChatRequest, ChatResponse


class BackendId(StrEnum):
    """Identifiers of the upstream services Switchboard can route to.

    Declaration order is the priority order used when a caller does not ask
    for a specific backend.
    """

    HUGGINGFACE = "huggingface"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class BackendSpec:
    """Static facts about one backend: where its credential lives and its models."""

    id: BackendId
    label: str
    credential_env: str
    models: tuple[str, ...]
    default_model: str

    def __post_init__(self) -> None:
        """Keep the default model inside the catalog."""
        if not self.models:
            raise ValueError(f"{self.id}: model catalog must not be empty")
        if self.default_model not in self.models:
            raise ValueError(
                f"{self.id}: default model {self.default_model!r} not in catalog"
            )


BACKEND_SPECS: dict[BackendId, BackendSpec] = {
    BackendId.HUGGINGFACE: BackendSpec(
        id=BackendId.HUGGINGFACE,
        label="Hugging Face",
        credential_env="HF_TOKEN",
        models=(
            "meta-llama/Llama-3.2-3B-Instruct",
            "microsoft/DialoGPT-medium",
            "facebook/blenderbot-400M-distill",
            "Qwen/Qwen2.5-Coder-32B-Instruct",
        ),
        default_model="meta-llama/Llama-3.2-3B-Instruct",
    ),
    BackendId.OPENAI: BackendSpec(
        id=BackendId.OPENAI,
        label="OpenAI",
        credential_env="OPENAI_API_KEY",
        models=(
            "gpt-4o",
            "gpt-4o-mini",
            "gpt-3.5-turbo",
            "o1-preview",
            "o1-mini",
        ),
        default_model="gpt-4o-mini",
    ),
    BackendId.ANTHROPIC: BackendSpec(
        id=BackendId.ANTHROPIC,
        label="Anthropic",
        credential_env="ANTHROPIC_API_KEY",
        models=(
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-20241022",
            "claude-3-opus-20240229",
        ),
        default_model="claude-3-5-haiku-20241022",
    ),
}


@runtime_checkable
class ChatBackend(Protocol):
    """Minimal backend protocol: one chat-completion call, plus cleanup."""

    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        """Run a single chat completion."""
        ...

    async def aclose(self) -> None:
        """Release underlying client resources."""
        ...
