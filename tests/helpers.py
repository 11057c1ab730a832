"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: one fake backend covers success,
empty replies and failures, so suites do not grow one-off subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from switchboard.backends.base import BACKEND_SPECS, BackendId
from switchboard.backends.models import ChatRequest, ChatResponse
from switchboard.registry import Backend, BackendRegistry


@dataclass
class FakeBackend:
    """ChatBackend double that records requests and replays a scripted outcome."""

    reply: ChatResponse | None = field(default_factory=lambda: ChatResponse(text="ok"))
    error: BaseException | None = None
    calls: list[ChatRequest] = field(default_factory=list)
    closed: bool = False

    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.reply  # type: ignore[return-value]

    async def aclose(self) -> None:
        self.closed = True


class StatusError(Exception):
    """SDK-style error exposing an HTTP status the way client libraries do."""

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        response_status: int | None = None,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if response_status is not None:
            self.response = _Response(response_status)


@dataclass
class _Response:
    status_code: int
    headers: dict[str, Any] = field(default_factory=dict)


def make_registry(**clients: Any) -> BackendRegistry:
    """Build a registry from ``backend_id=client`` keyword pairs."""
    return BackendRegistry(
        Backend(spec=BACKEND_SPECS[BackendId(name)], client=client)
        for name, client in clients.items()
    )
